"""Google OAuth for connecting a user's Drive/Slides account.

The consent URL carries a signed ``state`` naming the requesting user so the
unauthenticated callback can attribute the grant.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = [
    "https://www.googleapis.com/auth/presentations",
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/documents",
]
STATE_MAX_AGE_SECONDS = 15 * 60
REQUEST_TIMEOUT_SECONDS = 15


class GoogleOAuthError(RuntimeError):
    """Raised when the OAuth exchange fails or the state is not trusted."""


@dataclass
class GoogleOAuthConfig:
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    state_secret: Optional[str] = None
    scopes: List[str] = field(default_factory=lambda: list(SCOPES))

    @classmethod
    def from_env(cls) -> "GoogleOAuthConfig":
        return cls(
            client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
            redirect_uri=os.getenv("GOOGLE_REDIRECT_URI") or None,
            state_secret=os.getenv("GOOGLE_STATE_SECRET") or None,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    @property
    def signing_key(self) -> bytes:
        return (self.state_secret or self.client_secret or "").encode("utf-8")


@dataclass(frozen=True)
class GoogleTokens:
    access_token: Optional[str]
    refresh_token: Optional[str]
    expiry: Optional[datetime]


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def sign_state(config: GoogleOAuthConfig, user_id: uuid.UUID, *, now: Optional[float] = None) -> str:
    payload = _b64(json.dumps({"uid": str(user_id), "ts": int(now or time.time())}).encode("utf-8"))
    signature = _b64(hmac.new(config.signing_key, payload.encode("ascii"), hashlib.sha256).digest())
    return f"{payload}.{signature}"


def verify_state(config: GoogleOAuthConfig, state: str, *, now: Optional[float] = None) -> uuid.UUID:
    """Return the user id from a state produced by ``sign_state``."""
    try:
        payload, signature = state.split(".", 1)
    except ValueError:
        raise GoogleOAuthError("Malformed OAuth state")
    expected = _b64(hmac.new(config.signing_key, payload.encode("ascii"), hashlib.sha256).digest())
    if not hmac.compare_digest(expected, signature):
        raise GoogleOAuthError("OAuth state signature mismatch")
    try:
        data = json.loads(_unb64(payload))
        user_id = uuid.UUID(data["uid"])
        issued = int(data["ts"])
    except (ValueError, KeyError, TypeError):
        raise GoogleOAuthError("Malformed OAuth state")
    if (now or time.time()) - issued > STATE_MAX_AGE_SECONDS:
        raise GoogleOAuthError("OAuth state expired")
    return user_id


def build_auth_url(config: GoogleOAuthConfig, user_id: uuid.UUID) -> str:
    """Offline, consent-prompted authorization URL for the Slides/Drive scopes."""
    params = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "response_type": "code",
        "scope": " ".join(config.scopes),
        "access_type": "offline",
        "prompt": "consent",
        "include_granted_scopes": "true",
        "state": sign_state(config, user_id),
    }
    return requests.Request("GET", AUTH_URI, params=params).prepare().url


def exchange_code(config: GoogleOAuthConfig, code: str) -> GoogleTokens:
    data = {
        "code": code,
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "redirect_uri": config.redirect_uri,
        "grant_type": "authorization_code",
    }
    try:
        resp = requests.post(TOKEN_URI, data=data, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise GoogleOAuthError(f"Token request failed: {exc}") from exc
    if resp.status_code != 200:
        logger.error("google_token_exchange_failed: status=%s body=%s", resp.status_code, resp.text[:500])
        raise GoogleOAuthError(f"Token endpoint returned {resp.status_code}")
    try:
        payload: Dict[str, Any] = resp.json()
        expires_in = payload.get("expires_in")
        expiry = datetime.now(timezone.utc) + timedelta(seconds=int(expires_in)) if expires_in else None
    except (ValueError, TypeError, AttributeError) as exc:
        raise GoogleOAuthError(f"Unreadable token response: {exc}") from exc
    return GoogleTokens(
        access_token=payload.get("access_token"),
        refresh_token=payload.get("refresh_token"),
        expiry=expiry,
    )


def get_google_oauth_config() -> GoogleOAuthConfig:
    return GoogleOAuthConfig.from_env()
