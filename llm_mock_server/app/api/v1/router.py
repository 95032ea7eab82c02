from fastapi import APIRouter
from llm_mock_server.app.api.v1.endpoints import chat, token

api_router = APIRouter()
api_router.include_router(chat.router, prefix="/chat", tags=["Chat Completions"])

# 토큰 발급은 /v1 밖에 마운트
token_router = APIRouter()
token_router.include_router(token.router, tags=["Auth"])
