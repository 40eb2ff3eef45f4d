"""
Account API endpoints: registration, login and session tokens.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brandhub.api.auth import apply_admin_elevation, issue_session
from brandhub.api.deps import get_current_user_context, get_optional_user_context
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import tokens as token_repo
from brandhub.db.repositories import users as user_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(db: Session, user: models.User, message: Optional[str] = None) -> schemas.AuthResponse:
    token, raw = issue_session(db, user)
    return schemas.AuthResponse(
        token=raw,
        expires_at=token.expires_at,
        user=schemas.User.model_validate(user),
        message=message,
    )


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: schemas.RegisterRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_optional_user_context),
):
    caller, current_user = user_context
    if user_repo.get_by_username(db, payload.username) or user_repo.get_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User with this email or username already exists")

    message = None
    if user_repo.count_users(db) == 0:
        role = models.ROLE_ADMIN
        message = "First user created as admin"
    elif current_user and current_user.get("is_admin"):
        role = payload.role or models.ROLE_USER
    else:
        role = models.ROLE_USER

    user = user_repo.create_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        role=role,
    )
    user = apply_admin_elevation(db, user)
    logger.info("user_registered: username=%s role=%s", user.username, user.role)
    audit_log(
        db,
        action=AuditAction.USER_REGISTER,
        target_type="user",
        target_id=user.id,
        actor_user_id=caller.id if caller else user.id,
        metadata={"username": user.username, "role": user.role},
    )
    return _auth_response(db, user, message)


@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = user_repo.get_by_login(db, payload.username)
    if not user or not user_repo.verify_password(user, payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")
    user = user_repo.mark_login(db, user)
    user = apply_admin_elevation(db, user)
    return _auth_response(db, user)


@router.get("/me", response_model=schemas.User)
def me(user_context=Depends(get_current_user_context)):
    user, _ = user_context
    return user


@router.post("/refresh", response_model=schemas.AuthResponse)
def refresh(db: Session = Depends(get_db), user_context=Depends(get_current_user_context)):
    user, current_user = user_context
    response = _auth_response(db, user)
    token_id = current_user.get("token_id")
    if token_id:
        previous = token_repo.get_by_token_id(db, token_id=token_id)
        if previous is not None:
            token_repo.revoke_token(db, token=previous)
    return response


@router.post("/logout")
def logout(db: Session = Depends(get_db), user_context=Depends(get_current_user_context)):
    _user, current_user = user_context
    token_id = current_user.get("token_id")
    if token_id:
        token = token_repo.get_by_token_id(db, token_id=token_id)
        if token is not None:
            token_repo.revoke_token(db, token=token)
    return {"message": "Logged out"}
