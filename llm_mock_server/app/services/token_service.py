import time

import jwt
from pydantic import ValidationError

from llm_mock_server.app.models.auth import TokenClaims


class AuthRejected(Exception):
    """토큰이 없거나, 서명/만료/형식 중 하나라도 잘못된 경우. 호출자에게는 구분하지 않습니다."""


class TokenService:
    """
    공유 비밀키로 JWT 를 발급하고 검증
    세션 저장소 없이 요청마다 디코딩만 수행
    """
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, user_id: str, company: str) -> str:
        """현재 시각 + ttl 만료로 서명된 토큰을 반환"""
        claims = TokenClaims(
            sub=user_id,
            company=company,
            exp=int(time.time()) + self.ttl_seconds,
        )
        return jwt.encode(claims.model_dump(), self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as e:
            raise AuthRejected(str(e)) from e

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise AuthRejected(f"malformed claims: {e.error_count()} error(s)") from e

    def verify_authorization_header(self, header: str | None) -> TokenClaims:
        """'Bearer <token>' 형식의 Authorization 헤더를 검증"""
        if not header:
            raise AuthRejected("missing authorization header")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthRejected("authorization scheme is not bearer")
        return self.verify(token.strip())
