from fastapi import APIRouter, Request

from llm_mock_server.app.models.auth import TokenRequest, TokenResponse
from llm_mock_server.app.core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

@router.post("/generate-token", response_model=TokenResponse)
async def generate_token(payload: TokenRequest, request: Request) -> TokenResponse:
    """테스트용 토큰 발급 (인증 불필요)"""
    token = request.app.state.token_service.issue(payload.user_id, payload.company)
    logger.info(f"issued token: subject={payload.user_id}, company={payload.company}")
    return TokenResponse(token=token)
