import os

# console-only logging while testing
os.environ.setdefault("MOCK_LOG_DIR", "")

import time

import jwt
import pytest
from fastapi.testclient import TestClient

from llm_mock_server.app.core.config import ServerSettings
from llm_mock_server.app.main import create_app

TEST_SECRET = "test-secret-please-ignore-0123456789"


@pytest.fixture()
def settings() -> ServerSettings:
    return ServerSettings(jwt_secret=TEST_SECRET, stream_delay_seconds=0.0)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_token():
    """Sign arbitrary claims, bypassing the issuance endpoint."""
    def _make(
        sub="alice",
        company="acme",
        exp_offset: int = 3600,
        secret: str = TEST_SECRET,
        **extra,
    ) -> str:
        claims = {"sub": sub, "company": company, "exp": int(time.time()) + exp_offset, **extra}
        claims = {key: value for key, value in claims.items() if value is not None}
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest.fixture()
def auth_headers(client):
    response = client.post("/generate-token", json={"user_id": "alice", "company": "acme"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
