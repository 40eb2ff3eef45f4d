"""Brand template repository functions."""
from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from brandhub.db import models, schemas


def list_templates(
    db: Session,
    *,
    tags: Optional[Sequence[str]] = None,
    template_type: Optional[str] = None,
) -> List[models.BrandTemplate]:
    query = db.query(models.BrandTemplate).filter(models.BrandTemplate.is_active.is_(True))
    if template_type:
        query = query.filter(models.BrandTemplate.template_type == template_type)
    templates = query.order_by(models.BrandTemplate.order_index, models.BrandTemplate.created_at).all()
    if tags:
        # JSON tag arrays are filtered in Python; the same query runs on SQLite and PostgreSQL
        wanted = set(tags)
        templates = [t for t in templates if wanted.intersection(t.tags or [])]
    return templates


def list_tags(db: Session) -> List[str]:
    tags = set()
    for (values,) in db.query(models.BrandTemplate.tags).filter(models.BrandTemplate.is_active.is_(True)):
        tags.update(tag for tag in (values or []) if tag)
    return sorted(tags)


def get_template(db: Session, template_id: uuid.UUID) -> Optional[models.BrandTemplate]:
    return db.query(models.BrandTemplate).filter(models.BrandTemplate.id == template_id).first()


def next_order_index(db: Session) -> int:
    current = db.query(func.max(models.BrandTemplate.order_index)).scalar()
    return (current or 0) + 1


def create_template(db: Session, *, values: Dict[str, Any], actor_user_id: Optional[uuid.UUID]) -> models.BrandTemplate:
    template = models.BrandTemplate(
        **values,
        order_index=next_order_index(db),
        created_by=actor_user_id,
        updated_by=actor_user_id,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def update_template(
    db: Session,
    template: models.BrandTemplate,
    fields: schemas.TemplateFields,
    *,
    extra: Optional[Dict[str, Any]] = None,
    actor_user_id: Optional[uuid.UUID],
) -> models.BrandTemplate:
    data = fields.model_dump(exclude_unset=True)
    data.update(extra or {})
    for key, value in data.items():
        setattr(template, key, value)
    template.updated_by = actor_user_id
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template: models.BrandTemplate) -> None:
    db.delete(template)
    db.commit()


def reorder_templates(db: Session, items: Iterable[schemas.ReorderItem]) -> int:
    updated = 0
    for item in items:
        updated += (
            db.query(models.BrandTemplate)
            .filter(models.BrandTemplate.id == item.id)
            .update({models.BrandTemplate.order_index: item.order_index}, synchronize_session=False)
        )
    db.commit()
    return updated
