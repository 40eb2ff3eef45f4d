"""
Repositories for session tokens.

Implements issue/lookup/revoke and last-used updates. Only the Argon2 hash of
the secret part is stored.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brandhub.db import models
from brandhub.utils import token_crypto

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on round-trip
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def create_token(db: Session, *, user_id: uuid.UUID, ttl_hours: int) -> Tuple[models.SessionToken, str]:
    token_id, secret, full_token = token_crypto.generate_token()
    token = models.SessionToken(
        user_id=user_id,
        token_id=token_id,
        token_hash=token_crypto.hash_secret(secret),
        created_at=_now(),
        expires_at=_now() + timedelta(hours=ttl_hours) if ttl_hours > 0 else None,
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    return token, full_token


def get_by_token_id(db: Session, *, token_id: str) -> Optional[models.SessionToken]:
    return db.query(models.SessionToken).filter(models.SessionToken.token_id == token_id).first()


def is_usable(token: models.SessionToken) -> bool:
    if token.revoked_at is not None:
        return False
    expires_at = _aware(token.expires_at)
    return expires_at is None or expires_at > _now()


def revoke_token(db: Session, *, token: models.SessionToken) -> None:
    if token.revoked_at is None:
        token.revoked_at = _now()
        db.commit()


def revoke_all_for_user(db: Session, *, user_id: uuid.UUID) -> int:
    count = (
        db.query(models.SessionToken)
        .filter(models.SessionToken.user_id == user_id, models.SessionToken.revoked_at.is_(None))
        .update({models.SessionToken.revoked_at: _now()}, synchronize_session=False)
    )
    db.commit()
    return count


def mark_used_now(db: Session, *, token: models.SessionToken) -> None:
    token.last_used_at = _now()
    try:
        db.commit()
    except SQLAlchemyError:
        logger.warning("Failed to record token use for %s", token.token_id, exc_info=True)
        db.rollback()
