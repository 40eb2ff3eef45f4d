import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from brandhub.services import google_oauth
from brandhub.services.google_oauth import (
    AUTH_URI,
    SCOPES,
    STATE_MAX_AGE_SECONDS,
    TOKEN_URI,
    GoogleOAuthConfig,
    GoogleOAuthError,
    build_auth_url,
    exchange_code,
    sign_state,
    verify_state,
)

NOW = 1_700_000_000


@pytest.fixture
def config():
    return GoogleOAuthConfig(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:8000/api/auth/google/callback",
    )


def test_config_from_env(monkeypatch):
    for name in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REDIRECT_URI", "GOOGLE_STATE_SECRET"):
        monkeypatch.delenv(name, raising=False)
    assert GoogleOAuthConfig.from_env().is_configured is False

    monkeypatch.setenv("GOOGLE_CLIENT_ID", "id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("GOOGLE_REDIRECT_URI", "http://localhost/cb")
    loaded = GoogleOAuthConfig.from_env()
    assert loaded.is_configured is True
    assert loaded.scopes == SCOPES
    assert loaded.signing_key == b"secret"


def test_state_round_trip(config):
    user_id = uuid.uuid4()
    state = sign_state(config, user_id, now=NOW)
    assert verify_state(config, state, now=NOW + 60) == user_id


def test_state_signed_with_dedicated_secret():
    user_id = uuid.uuid4()
    signer = GoogleOAuthConfig(client_secret="a", state_secret="state-key")
    state = sign_state(signer, user_id, now=NOW)
    with pytest.raises(GoogleOAuthError, match="signature"):
        verify_state(GoogleOAuthConfig(client_secret="a"), state, now=NOW)


def test_tampered_state_rejected(config):
    state = sign_state(config, uuid.uuid4(), now=NOW)
    payload, signature = state.split(".")
    forged = sign_state(config, uuid.uuid4(), now=NOW).split(".")[0]
    with pytest.raises(GoogleOAuthError, match="signature"):
        verify_state(config, f"{forged}.{signature}", now=NOW)


@pytest.mark.parametrize("state", ["", "no-dot", "abc.def"])
def test_malformed_state_rejected(config, state):
    with pytest.raises(GoogleOAuthError):
        verify_state(config, state, now=NOW)


def test_expired_state_rejected(config):
    state = sign_state(config, uuid.uuid4(), now=NOW)
    with pytest.raises(GoogleOAuthError, match="expired"):
        verify_state(config, state, now=NOW + STATE_MAX_AGE_SECONDS + 1)


def test_auth_url_requests_offline_consent(config):
    user_id = uuid.uuid4()
    url = build_auth_url(config, user_id)

    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == AUTH_URI
    params = parse_qs(parsed.query)
    assert params["client_id"] == ["client-id"]
    assert params["redirect_uri"] == [config.redirect_uri]
    assert params["response_type"] == ["code"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]
    assert params["scope"] == [" ".join(SCOPES)]
    assert verify_state(config, params["state"][0]) == user_id


def test_exchange_code_success(config, monkeypatch):
    seen = {}

    def fake_post(url, data, timeout):
        seen.update(url=url, data=data)
        return SimpleNamespace(
            status_code=200,
            text="",
            json=lambda: {"access_token": "at", "refresh_token": "rt", "expires_in": 3600},
        )

    monkeypatch.setattr(google_oauth.requests, "post", fake_post)
    before = datetime.now(timezone.utc)

    tokens = exchange_code(config, "auth-code")

    assert seen["url"] == TOKEN_URI
    assert seen["data"]["code"] == "auth-code"
    assert seen["data"]["grant_type"] == "authorization_code"
    assert tokens.access_token == "at"
    assert tokens.refresh_token == "rt"
    assert 3590 <= (tokens.expiry - before).total_seconds() <= 3610


def test_exchange_code_error_status(config, monkeypatch):
    monkeypatch.setattr(
        google_oauth.requests,
        "post",
        lambda url, data, timeout: SimpleNamespace(status_code=400, text='{"error": "invalid_grant"}', json=dict),
    )
    with pytest.raises(GoogleOAuthError, match="400"):
        exchange_code(config, "bad")


def test_exchange_code_network_error(config, monkeypatch):
    def boom(url, data, timeout):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(google_oauth.requests, "post", boom)
    with pytest.raises(GoogleOAuthError, match="Token request failed"):
        exchange_code(config, "code")


def _invalid_json():
    raise ValueError("Expecting value")


@pytest.mark.parametrize(
    "body",
    [
        _invalid_json,
        lambda: {"access_token": "at", "expires_in": "soon"},
        lambda: ["not", "an", "object"],
    ],
)
def test_exchange_code_unreadable_response(config, monkeypatch, body):
    monkeypatch.setattr(
        google_oauth.requests,
        "post",
        lambda url, data, timeout: SimpleNamespace(status_code=200, text="", json=body),
    )
    with pytest.raises(GoogleOAuthError, match="Unreadable token response"):
        exchange_code(config, "code")
