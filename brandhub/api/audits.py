"""
Audit log API endpoints (admin only).
"""
from typing import Optional, List
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from brandhub.api.deps import require_admin
from brandhub.db import schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import audits as audit_repo

router = APIRouter(prefix="/api/audits", tags=["audits"])


@router.get("/", response_model=List[schemas.AuditLog])
def list_audit_logs(
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    actor_user_id: Optional[uuid.UUID] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    return audit_repo.get_audit_logs(
        db,
        actor_user_id=actor_user_id,
        action_type=action_type,
        target_type=target_type,
        skip=skip,
        limit=limit,
    )
