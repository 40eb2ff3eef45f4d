"""
User administration API endpoints (admin only).
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brandhub.api.deps import require_admin
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import tokens as token_repo
from brandhub.db.repositories import users as user_repo

router = APIRouter(prefix="/api/users", tags=["users"])


def _get_user_or_404(db: Session, user_id: uuid.UUID) -> models.User:
    user = user_repo.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _is_last_active_admin(db: Session, user: models.User) -> bool:
    return user.role == models.ROLE_ADMIN and user.is_active and user_repo.count_active_admins(db) <= 1


@router.get("/", response_model=List[schemas.User])
def list_users(
    skip: int = 0,
    limit: int = 200,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    return user_repo.list_users(db, skip=skip, limit=limit)


@router.put("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: uuid.UUID,
    payload: schemas.UserUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    admin, _ = user_context
    user = _get_user_or_404(db, user_id)

    demoting = payload.role is not None and payload.role != models.ROLE_ADMIN
    deactivating = payload.is_active is False
    if user.id == admin.id and deactivating:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    if (demoting or deactivating) and _is_last_active_admin(db, user):
        raise HTTPException(status_code=400, detail="At least one active admin is required")
    if payload.username and payload.username != user.username and user_repo.get_by_username(db, payload.username):
        raise HTTPException(status_code=400, detail="Username already in use")
    if payload.email and payload.email != user.email and user_repo.get_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Email already in use")

    updated = user_repo.update_user(db, user, payload)
    if deactivating:
        token_repo.revoke_all_for_user(db, user_id=updated.id)
    audit_log(
        db,
        action=AuditAction.USER_UPDATE,
        target_type="user",
        target_id=updated.id,
        actor_user_id=admin.id,
        metadata=payload.model_dump(exclude_unset=True),
    )
    return updated


@router.put("/{user_id}/password")
def set_password(
    user_id: uuid.UUID,
    payload: schemas.PasswordUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    admin, _ = user_context
    user = _get_user_or_404(db, user_id)
    user_repo.set_password(db, user, payload.password)
    audit_log(
        db,
        action=AuditAction.USER_PASSWORD_RESET,
        target_type="user",
        target_id=user.id,
        actor_user_id=admin.id,
    )
    return {"message": "Password updated"}


@router.delete("/{user_id}")
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    admin, _ = user_context
    user = _get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    if _is_last_active_admin(db, user):
        raise HTTPException(status_code=400, detail="At least one active admin is required")
    username = user.username
    token_repo.revoke_all_for_user(db, user_id=user.id)
    user_repo.delete_user(db, user)
    audit_log(
        db,
        action=AuditAction.USER_DELETE,
        target_type="user",
        target_id=user_id,
        actor_user_id=admin.id,
        metadata={"username": username},
    )
    return {"message": "User deleted"}
