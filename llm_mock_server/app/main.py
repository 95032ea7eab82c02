from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from llm_mock_server.app.core.config import ServerSettings
from llm_mock_server.app.core.logger import get_logger
from llm_mock_server.app.api.v1.router import api_router, token_router
from llm_mock_server.app.middleware.auth import BearerAuthMiddleware
from llm_mock_server.app.services.token_service import TokenService

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info("starting up...")
    logger.info(f"auth {'enabled' if settings.auth_enabled else 'disabled'}, "
                f"stream tokens={len(settings.stream_tokens)}, delay={settings.stream_delay_seconds}s")
    if settings.uses_default_secret:
        logger.warning("using the built-in development JWT secret; set MOCK_JWT_SECRET to override")
    yield
    logger.info("shutting down...")

def create_app(settings: Optional[ServerSettings] = None) -> FastAPI:
    settings = settings or ServerSettings()

    app = FastAPI(
        title="Mock LLM Server",
        description="테스트용 Chat Completions Mock 서버 (JWT 인증 선택)",
        version="1.0.0",
        lifespan=lifespan
    )
    # 발급과 검증이 같은 설정/비밀키를 공유
    app.state.settings = settings
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )

    if settings.auth_enabled:
        app.add_middleware(BearerAuthMiddleware)

    app.include_router(api_router, prefix="/v1")
    app.include_router(token_router)
    return app

app = create_app()
