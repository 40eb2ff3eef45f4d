"""
User repository functions.

Lookup by id/username/email, registration, admin updates and the stored
Google OAuth grant.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from brandhub.db import models, schemas
from brandhub.utils import token_crypto


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_user(db: Session, user_id: uuid.UUID) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_by_username(db: Session, username: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.username == username).first()


def get_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_by_login(db: Session, identifier: str) -> Optional[models.User]:
    """Resolve a login identifier that may be a username or an email."""
    ident = identifier.strip()
    return (
        db.query(models.User)
        .filter(or_(models.User.username == ident, models.User.email == ident.lower()))
        .first()
    )


def count_users(db: Session) -> int:
    return db.query(func.count(models.User.id)).scalar() or 0


def count_active_admins(db: Session) -> int:
    return (
        db.query(func.count(models.User.id))
        .filter(models.User.role == models.ROLE_ADMIN, models.User.is_active.is_(True))
        .scalar()
        or 0
    )


def list_users(db: Session, *, skip: int = 0, limit: int = 200) -> List[models.User]:
    return db.query(models.User).order_by(models.User.created_at.asc()).offset(skip).limit(limit).all()


def create_user(db: Session, *, username: str, email: str, password: str, role: str = models.ROLE_USER) -> models.User:
    user = models.User(
        username=username,
        email=email.strip().lower(),
        password_hash=token_crypto.hash_secret(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def verify_password(user: models.User, password: str) -> bool:
    return token_crypto.verify_secret(password, user.password_hash)


def mark_login(db: Session, user: models.User) -> models.User:
    user.last_login_at = _now()
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: models.User, payload: schemas.UserUpdate) -> models.User:
    data = payload.model_dump(exclude_unset=True)
    for field in ("username", "email", "role", "is_active"):
        if field in data and data[field] is not None:
            setattr(user, field, data[field])
    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user: models.User, password: str) -> None:
    user.password_hash = token_crypto.hash_secret(password)
    db.commit()


def delete_user(db: Session, user: models.User) -> None:
    db.delete(user)
    db.commit()


def set_google_tokens(
    db: Session,
    user: models.User,
    *,
    access_token: Optional[str],
    refresh_token: Optional[str],
    expiry: Optional[datetime],
) -> models.User:
    user.google_access_token = access_token
    # Google only returns a refresh token on the first consent; keep the old one otherwise
    if refresh_token:
        user.google_refresh_token = refresh_token
    user.google_token_expiry = expiry
    db.commit()
    db.refresh(user)
    return user


def clear_google_tokens(db: Session, user: models.User) -> None:
    user.google_access_token = None
    user.google_refresh_token = None
    user.google_token_expiry = None
    db.commit()
