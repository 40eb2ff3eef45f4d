import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest

from brandhub.api import google_auth
from brandhub.api.main import app
from brandhub.db import models
from brandhub.services import google_oauth
from brandhub.services.google_oauth import (
    GoogleOAuthConfig,
    GoogleOAuthError,
    GoogleTokens,
    get_google_oauth_config,
    sign_state,
)

CONFIG = GoogleOAuthConfig(
    client_id="client-id",
    client_secret="client-secret",
    redirect_uri="http://localhost:8000/api/auth/google/callback",
)


@pytest.fixture(autouse=True)
def _google_config(monkeypatch):
    monkeypatch.delenv("CLIENT_URL", raising=False)
    monkeypatch.delenv("APP_BASE_URL", raising=False)
    app.dependency_overrides[get_google_oauth_config] = lambda: CONFIG
    yield
    app.dependency_overrides.pop(get_google_oauth_config, None)


def test_auth_url_carries_signed_state(client, member):
    user, headers = member
    r = client.get("/api/auth/google/", headers=headers)
    assert r.status_code == 200
    url = urlparse(r.json()["auth_url"])
    params = parse_qs(url.query)
    assert url.netloc == "accounts.google.com"
    assert params["client_id"] == ["client-id"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]
    assert "." in params["state"][0]


def test_auth_url_requires_login(client):
    assert client.get("/api/auth/google/").status_code == 401


def test_auth_url_when_not_configured(client, user_headers):
    app.dependency_overrides[get_google_oauth_config] = lambda: GoogleOAuthConfig()
    r = client.get("/api/auth/google/", headers=user_headers)
    assert r.status_code == 503
    assert r.json()["detail"] == "Google integration is not configured"


def test_callback_stores_tokens(client, db, member, monkeypatch):
    user, headers = member
    seen = {}

    def _exchange(config, code):
        seen["code"] = code
        return GoogleTokens(
            access_token="access-1",
            refresh_token="refresh-1",
            expiry=datetime.now(timezone.utc) + timedelta(hours=1),
        )

    monkeypatch.setattr(google_auth, "exchange_code", _exchange)
    r = client.get(
        "/api/auth/google/callback",
        params={"code": "abc", "state": sign_state(CONFIG, user.id)},
        follow_redirects=False,
    )
    assert r.status_code == 302
    assert r.headers["location"] == "http://localhost:3000?google_connected=true"
    assert seen["code"] == "abc"

    stored = db.query(models.User).filter(models.User.id == user.id).one()
    assert stored.google_access_token == "access-1"
    assert stored.google_refresh_token == "refresh-1"

    status = client.get("/api/auth/google/status", headers=headers).json()
    assert status == {"connected": True, "has_refresh_token": True}


def test_callback_missing_params(client):
    r = client.get("/api/auth/google/callback", params={"code": "abc"}, follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"].endswith("?google_error=missing_params")


def test_callback_rejects_tampered_state(client, member, monkeypatch):
    user, _ = member
    monkeypatch.setattr(google_auth, "exchange_code", lambda config, code: pytest.fail("must not exchange"))
    other = GoogleOAuthConfig(client_id="x", client_secret="another-secret", redirect_uri="http://x")
    r = client.get(
        "/api/auth/google/callback",
        params={"code": "abc", "state": sign_state(other, user.id)},
        follow_redirects=False,
    )
    assert r.headers["location"].endswith("?google_error=auth_failed")


def test_callback_unknown_user(client):
    r = client.get(
        "/api/auth/google/callback",
        params={"code": "abc", "state": sign_state(CONFIG, uuid.uuid4())},
        follow_redirects=False,
    )
    assert r.headers["location"].endswith("?google_error=auth_failed")


def test_callback_exchange_failure(client, member, monkeypatch):
    user, _ = member

    def _exchange(config, code):
        raise GoogleOAuthError("Token endpoint returned 400")

    monkeypatch.setattr(google_auth, "exchange_code", _exchange)
    r = client.get(
        "/api/auth/google/callback",
        params={"code": "bad", "state": sign_state(CONFIG, user.id)},
        follow_redirects=False,
    )
    assert r.headers["location"] == "http://localhost:3000?google_error=auth_failed"


def test_status_and_disconnect(client, db, member):
    user, headers = member
    assert client.get("/api/auth/google/status", headers=headers).json() == {
        "connected": False,
        "has_refresh_token": False,
    }

    user.google_access_token = "access"
    user.google_refresh_token = "refresh"
    db.commit()
    assert client.get("/api/auth/google/status", headers=headers).json()["connected"] is True

    r = client.delete("/api/auth/google/disconnect", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Google account disconnected"}
    assert client.get("/api/auth/google/status", headers=headers).json()["connected"] is False


def test_callback_with_unreadable_token_response(client, member, monkeypatch):
    user, _ = member

    def _bad_json():
        raise ValueError("Expecting value")

    monkeypatch.setattr(
        google_oauth.requests,
        "post",
        lambda url, data, timeout: SimpleNamespace(status_code=200, text="<html>", json=_bad_json),
    )
    r = client.get(
        "/api/auth/google/callback",
        params={"code": "abc", "state": sign_state(CONFIG, user.id)},
        follow_redirects=False,
    )
    assert r.status_code == 302
    assert r.headers["location"].endswith("?google_error=auth_failed")
