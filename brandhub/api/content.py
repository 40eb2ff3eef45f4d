"""
Content section API endpoints (brand voice, messaging, positioning).
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from brandhub.api.deps import require_admin
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import content as content_repo

router = APIRouter(prefix="/api/content", tags=["content"])


def _get_section_or_404(db: Session, section: str) -> models.ContentSection:
    record = content_repo.get_section(db, section)
    if not record:
        raise HTTPException(status_code=404, detail="Content section not found")
    return record


@router.get("/", response_model=List[schemas.ContentSection])
def list_sections_endpoint(db: Session = Depends(get_db)):
    return content_repo.list_sections(db)


@router.get("/{section}", response_model=schemas.ContentSection)
def get_section_endpoint(section: str, db: Session = Depends(get_db)):
    return _get_section_or_404(db, section)


@router.post("/", response_model=schemas.ContentSection)
def upsert_section_endpoint(
    payload: schemas.ContentUpsert,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    if payload.section not in models.EDITABLE_CONTENT_SECTIONS:
        raise HTTPException(status_code=400, detail="Invalid section")
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    record = content_repo.upsert_section(
        db,
        section=payload.section,
        title=title,
        content=payload.content or "",
        order_index=payload.order_index,
    )
    audit_log(
        db,
        action=AuditAction.CONTENT_UPSERT,
        target_type="content",
        target_id=record.id,
        actor_user_id=user.id,
        metadata={"section": record.section},
    )
    return record


@router.put("/{section}", response_model=schemas.ContentSection)
def update_section_endpoint(
    section: str,
    payload: schemas.ContentUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    record = content_repo.update_section(db, _get_section_or_404(db, section), payload)
    audit_log(
        db,
        action=AuditAction.CONTENT_UPDATE,
        target_type="content",
        target_id=record.id,
        actor_user_id=user.id,
        metadata={"section": section, "fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return record


@router.delete("/{section}")
def delete_section_endpoint(
    section: str,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    record = _get_section_or_404(db, section)
    record_id = record.id
    content_repo.delete_section(db, record)
    audit_log(
        db,
        action=AuditAction.CONTENT_DELETE,
        target_type="content",
        target_id=record_id,
        actor_user_id=user.id,
        metadata={"section": section},
    )
    return {"message": "Content section deleted successfully"}
