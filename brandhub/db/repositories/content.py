"""Content section repository functions (markdown blocks keyed by section)."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from brandhub.db import models, schemas


def list_sections(db: Session, *, active_only: bool = True) -> List[models.ContentSection]:
    query = db.query(models.ContentSection)
    if active_only:
        query = query.filter(models.ContentSection.is_active.is_(True))
    return query.order_by(models.ContentSection.order_index, models.ContentSection.section).all()


def get_section(db: Session, section: str) -> Optional[models.ContentSection]:
    return db.query(models.ContentSection).filter(models.ContentSection.section == section).first()


def upsert_section(
    db: Session,
    *,
    section: str,
    title: str,
    content: str,
    order_index: Optional[int] = None,
) -> models.ContentSection:
    record = get_section(db, section)
    if record is None:
        record = models.ContentSection(section=section, title=title, content=content, order_index=order_index or 0)
        db.add(record)
    else:
        record.title = title
        record.content = content
        if order_index is not None:
            record.order_index = order_index
    db.commit()
    db.refresh(record)
    return record


def update_section(db: Session, record: models.ContentSection, payload: schemas.ContentUpdate) -> models.ContentSection:
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(record, key, value)
    db.commit()
    db.refresh(record)
    return record


def delete_section(db: Session, record: models.ContentSection) -> None:
    db.delete(record)
    db.commit()
