"""
API dependency helpers.

Provides dependency-resolved user context for routes.
"""
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from brandhub.api.auth import bearer_token, get_or_create_dev_user
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import tokens as token_repo
from brandhub.db.repositories import users as user_repo
from brandhub.utils.runtime import dev_mode_active
from brandhub.utils.token_crypto import parse_token, verify_secret

# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved.

UserContext = Tuple[models.User, Dict[str, Any]]


def _context_for(user: models.User, token: Optional[models.SessionToken]) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "is_admin": user.role == models.ROLE_ADMIN,
        "token_id": token.token_id if token is not None else None,
    }


def _user_from_token(db: Session, raw_token: str) -> UserContext:
    parsed = parse_token(raw_token)
    if not parsed:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token format")
    token = token_repo.get_by_token_id(db, token_id=parsed.token_id)
    if not token or not token_repo.is_usable(token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    if not verify_secret(parsed.secret, token.token_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    user = user_repo.get_user(db, token.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token user")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")
    token_repo.mark_used_now(db, token=token)
    return user, _context_for(user, token)


def get_current_user_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> UserContext:
    raw = bearer_token(authorization)
    if raw:
        return _user_from_token(db, raw)
    if dev_mode_active():
        user = get_or_create_dev_user(db)
        return user, _context_for(user, None)
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")


def get_optional_user_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
):
    """Return (user, context) when authenticated; otherwise (guest) return (None, None).

    A token that is present but invalid is still rejected with 401.
    """
    if bearer_token(authorization) or dev_mode_active():
        return get_current_user_context(db=db, authorization=authorization)
    return None, None


def require_admin(user_context: UserContext = Depends(get_current_user_context)) -> UserContext:
    _user, current_user = user_context
    if not current_user.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user_context


def parse_reorder_items(payload: Any) -> List[schemas.ReorderItem]:
    """Validate a ``{"items": [{"id", "order_index"}]}`` reorder body.

    Shared by the asset, template, tool and color reorder endpoints.
    """
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Items array is required")
    try:
        return schemas.ReorderRequest.model_validate({"items": items}).items
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid reorder item: {exc.errors()[0]['msg']}")
