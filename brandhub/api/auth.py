"""
Authentication helpers.

Session issuance, ADMIN_EMAILS elevation and the DEV_MODE local user.
"""
import logging
import os
import secrets
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from brandhub.db import models
from brandhub.db.repositories import tokens as token_repo
from brandhub.db.repositories import users as user_repo

logger = logging.getLogger(__name__)

DEV_USERNAME = "dev"
DEV_EMAIL = "dev@localhost"
DEFAULT_SESSION_TTL_HOURS = 168


def _normalize_list_env(var_name: str) -> set:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return values


def _admin_emails() -> set:
    return _normalize_list_env("ADMIN_EMAILS")


def session_ttl_hours() -> int:
    raw = os.getenv("SESSION_TOKEN_TTL_HOURS", "")
    return int(raw) if raw.strip().isdigit() else DEFAULT_SESSION_TTL_HOURS


def apply_admin_elevation(db: Session, user: models.User) -> models.User:
    """Promote users listed in ADMIN_EMAILS; never demotes."""
    if user.email in _admin_emails() and user.role != models.ROLE_ADMIN:
        user.role = models.ROLE_ADMIN
        db.commit()
        db.refresh(user)
        logger.info("admin_elevation: user=%s", user.username)
    return user


def issue_session(db: Session, user: models.User) -> Tuple[models.SessionToken, str]:
    return token_repo.create_token(db, user_id=user.id, ttl_hours=session_ttl_hours())


def get_or_create_dev_user(db: Session) -> models.User:
    user = user_repo.get_by_email(db, DEV_EMAIL)
    if user is None:
        # Random password: the dev user is only reachable through DEV_MODE
        user = user_repo.create_user(
            db,
            username=DEV_USERNAME,
            email=DEV_EMAIL,
            password=secrets.token_urlsafe(24),
            role=models.ROLE_ADMIN,
        )
    return user


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        value = authorization[7:].strip()
        return value or None
    return None
