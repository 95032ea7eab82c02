import os
import re
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def split_into_tokens(text: str) -> Tuple[str, ...]:
    """문장을 단어 단위 토큰으로 분리합니다. 단어 뒤의 공백은 해당 토큰에 포함됩니다."""
    return tuple(re.findall(r"\S+\s*", text))


HOST: str = os.getenv("MOCK_HOST", "127.0.0.1")
PORT: int = int(os.getenv("MOCK_PORT", "3000"))
RELOAD: bool = _env_bool("MOCK_RELOAD", False)

# 개발용 기본값. 실제 환경에서는 MOCK_JWT_SECRET 으로 덮어쓸 것
DEFAULT_JWT_SECRET: str = "your-super-secret-and-long-key"
JWT_SECRET: str = os.getenv("MOCK_JWT_SECRET", DEFAULT_JWT_SECRET)
JWT_ALGORITHM: str = "HS256"
TOKEN_TTL_SECONDS: int = int(os.getenv("MOCK_TOKEN_TTL_SECONDS", "3600"))  # 1시간

AUTH_ENABLED: bool = _env_bool("MOCK_AUTH_ENABLED", True)

STREAM_DELAY_SECONDS: float = float(os.getenv("MOCK_STREAM_DELAY_SECONDS", "0.05"))  # 토큰 사이 50ms
STREAM_TEXT: str = os.getenv(
    "MOCK_STREAM_TEXT",
    "Hello from your local mock server! This is a streaming response.",
)
NON_STREAMING_TEXT: str = os.getenv(
    "MOCK_NON_STREAMING_TEXT",
    "Hello from your local mock server! This is a non-streaming response.",
)

LOG_DIR: str = os.getenv("MOCK_LOG_DIR", "logs")
LOG_LEVEL: str = os.getenv("MOCK_LOG_LEVEL", "INFO")


class ServerSettings(BaseModel):
    """앱 생성 시점에 고정되는 서버 설정. 발급/검증 양쪽에 같은 인스턴스가 주입됩니다."""
    model_config = ConfigDict(frozen=True)

    jwt_secret: str = Field(default=JWT_SECRET, repr=False)
    jwt_algorithm: str = JWT_ALGORITHM
    token_ttl_seconds: int = TOKEN_TTL_SECONDS
    auth_enabled: bool = AUTH_ENABLED
    stream_delay_seconds: float = STREAM_DELAY_SECONDS
    stream_tokens: Tuple[str, ...] = split_into_tokens(STREAM_TEXT)
    non_streaming_text: str = NON_STREAMING_TEXT

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET
