"""Endpoint tests for token issuance, the bearer auth gate and chat completions."""

import json

import pytest
from fastapi.testclient import TestClient

from llm_mock_server.app.core.config import ServerSettings
from llm_mock_server.app.main import create_app

from conftest import TEST_SECRET

CHAT_URL = "/v1/chat/completions"
CHAT_BODY = {"messages": [{"role": "user", "content": "hi"}], "model": "mock-1", "stream": False}
NON_STREAMING_TEXT = "Hello from your local mock server! This is a non-streaming response."
STREAMING_TEXT = "Hello from your local mock server! This is a streaming response."


def read_events(client, headers, body):
    with client.stream("POST", CHAT_URL, json=body, headers=headers) as response:
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        lines = list(response.iter_lines())
    return [line[len("data: "):] for line in lines if line.startswith("data: ")]


# --- token issuance ---

def test_generate_token_round_trip(client, app):
    response = client.post("/generate-token", json={"user_id": "u1", "company": "acme"})
    assert response.status_code == 200
    token = response.json()["token"]

    claims = app.state.token_service.verify(token)
    assert (claims.sub, claims.company) == ("u1", "acme")


def test_generate_token_requires_both_fields(client):
    assert client.post("/generate-token", json={"user_id": "u1"}).status_code == 422


# --- auth gate ---

def test_missing_authorization_is_401(client):
    response = client.post(CHAT_URL, json=CHAT_BODY)
    assert response.status_code == 401
    assert response.content == b""


def test_foreign_secret_is_401(client, make_token):
    token = make_token(secret="a-different-secret-nobody-shares")
    response = client.post(CHAT_URL, json=CHAT_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_expired_token_is_401(client, make_token):
    token = make_token(exp_offset=-3600)
    response = client.post(CHAT_URL, json=CHAT_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_malformed_claims_are_401(client, make_token):
    token = make_token(company=None)
    response = client.post(CHAT_URL, json=CHAT_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_auth_checked_before_body_validation(client):
    assert client.post(CHAT_URL, content=b"{not json").status_code == 401


def test_token_endpoint_is_not_gated(client):
    assert client.post("/generate-token", json={"user_id": "a", "company": "b"}).status_code == 200


def test_auth_can_be_disabled():
    app = create_app(ServerSettings(jwt_secret=TEST_SECRET, auth_enabled=False, stream_delay_seconds=0.0))
    with TestClient(app) as client:
        response = client.post(CHAT_URL, json=CHAT_BODY)
    assert response.status_code == 200


# --- non-streaming ---

def test_concrete_scenario(client):
    token = client.post("/generate-token", json={"user_id": "alice", "company": "acme"}).json()["token"]
    response = client.post(CHAT_URL, json=CHAT_BODY, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    body = response.json()
    assert body["object"] == "chat.completion"
    assert body["model"] == "mock-1"
    assert body["id"].startswith("cmpl-")
    assert isinstance(body["created"], int)
    assert body["choices"][0]["finish_reason"] == "stop"
    assert body["choices"][0]["message"] == {"role": "assistant", "content": NON_STREAMING_TEXT}


@pytest.mark.parametrize("extra", [{}, {"stream": None}, {"temperature": 0.2, "max_tokens": 16}])
def test_stream_absent_or_false_returns_single_completion(client, auth_headers, extra):
    body = {"messages": [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}], "model": "m"}
    body.update(extra)
    response = client.post(CHAT_URL, json=body, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["choices"][0]["message"]["content"]


def test_fresh_id_per_completion(client, auth_headers):
    first = client.post(CHAT_URL, json=CHAT_BODY, headers=auth_headers).json()
    second = client.post(CHAT_URL, json=CHAT_BODY, headers=auth_headers).json()
    assert first["id"] != second["id"]


@pytest.mark.parametrize("body", [
    {"model": "m"},
    {"messages": [{"role": "user", "content": "hi"}]},
    {"messages": [{"role": "robot", "content": "hi"}], "model": "m"},
    {"messages": [{"role": "user"}], "model": "m"},
])
def test_malformed_request_is_client_error(client, auth_headers, body):
    assert client.post(CHAT_URL, json=body, headers=auth_headers).status_code == 422


# --- streaming ---

def test_streaming_sequence(client, auth_headers):
    events = read_events(client, auth_headers, {**CHAT_BODY, "stream": True})

    assert events[-1] == "[DONE]"
    stop_chunk = json.loads(events[-2])
    assert stop_chunk["choices"][0] == {"index": 0, "delta": {}, "finish_reason": "stop"}

    content_chunks = [json.loads(data) for data in events[:-2]]
    assert len(content_chunks) == len(STREAMING_TEXT.split())
    assert "".join(c["choices"][0]["delta"]["content"] for c in content_chunks) == STREAMING_TEXT
    for chunk in content_chunks:
        assert chunk["object"] == "chat.completion.chunk"
        assert chunk["model"] == "mock-1"
        assert chunk["choices"][0]["finish_reason"] is None
        assert "role" not in chunk["choices"][0]["delta"]

    ids = [c["id"] for c in content_chunks] + [stop_chunk["id"]]
    assert len(set(ids)) == len(ids)


def test_streaming_is_reproducible(client, auth_headers):
    def contents():
        events = read_events(client, auth_headers, {**CHAT_BODY, "stream": True})
        return [json.loads(data)["choices"][0]["delta"].get("content") for data in events[:-1]]

    assert contents() == contents()


def test_streaming_uses_injected_tokens():
    settings = ServerSettings(jwt_secret=TEST_SECRET, stream_tokens=("a ", "b ", "c"), stream_delay_seconds=0.0)
    with TestClient(create_app(settings)) as client:
        token = client.post("/generate-token", json={"user_id": "u", "company": "c"}).json()["token"]
        events = read_events(client, {"Authorization": f"Bearer {token}"}, {**CHAT_BODY, "stream": True})

    assert len(events) == 5
    assert [json.loads(e)["choices"][0]["delta"].get("content") for e in events[:3]] == ["a ", "b ", "c"]
