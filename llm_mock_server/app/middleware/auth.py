from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from llm_mock_server.app.core.logger import get_logger
from llm_mock_server.app.services.token_service import AuthRejected

logger = get_logger(__name__)

PROTECTED_PATHS = frozenset({"/v1/chat/completions"})

class BearerAuthMiddleware(BaseHTTPMiddleware):
    """
    Chat Completions 앞단에서 Bearer 토큰을 검증하는 미들웨어
    """
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # 인증을 적용할 경로만 확인
        if request.url.path not in PROTECTED_PATHS:
            return await call_next(request)

        # main.py 의 create_app 에서 주입된 TokenService 인스턴스
        token_service = request.app.state.token_service

        try:
            claims = token_service.verify_authorization_header(request.headers.get("Authorization"))
        except AuthRejected as e:
            # 만료/서명 오류 등은 구분 없이 401
            logger.warning(f"rejected request to {request.url.path}: {e}")
            return Response(status_code=status.HTTP_401_UNAUTHORIZED)

        logger.info(f"token validated: subject={claims.sub}, company={claims.company}")
        request.state.claims = claims
        return await call_next(request)
