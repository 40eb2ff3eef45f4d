"""Brand tool repository functions and slug helpers."""
from __future__ import annotations

import re
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from brandhub.db import models, schemas

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to '-', strip edge dashes."""
    return _NON_SLUG_CHARS.sub("-", (title or "").lower()).strip("-")


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug and SLUG_PATTERN.match(slug))


def list_tools(db: Session, *, include_inactive: bool = False) -> List[models.BrandTool]:
    query = db.query(models.BrandTool)
    if not include_inactive:
        query = query.filter(models.BrandTool.is_active.is_(True))
    return query.order_by(models.BrandTool.order_index, models.BrandTool.created_at).all()


def get_tool(db: Session, tool_id: uuid.UUID) -> Optional[models.BrandTool]:
    return db.query(models.BrandTool).filter(models.BrandTool.id == tool_id).first()


def get_by_slug(db: Session, slug: str, *, active_only: bool = True) -> Optional[models.BrandTool]:
    query = db.query(models.BrandTool).filter(models.BrandTool.slug == slug)
    if active_only:
        query = query.filter(models.BrandTool.is_active.is_(True))
    return query.first()


def slug_taken(db: Session, slug: str, *, exclude_id: Optional[uuid.UUID] = None) -> bool:
    query = db.query(models.BrandTool.id).filter(models.BrandTool.slug == slug)
    if exclude_id is not None:
        query = query.filter(models.BrandTool.id != exclude_id)
    return query.first() is not None


def next_order_index(db: Session) -> int:
    current = db.query(func.max(models.BrandTool.order_index)).scalar()
    return (current or 0) + 1


def create_tool(db: Session, *, values: Dict[str, Any], actor_user_id: Optional[uuid.UUID]) -> models.BrandTool:
    values = dict(values)
    if values.get("order_index") is None:
        values["order_index"] = next_order_index(db)
    tool = models.BrandTool(**values, created_by=actor_user_id, updated_by=actor_user_id)
    db.add(tool)
    db.commit()
    db.refresh(tool)
    return tool


def update_tool(
    db: Session,
    tool: models.BrandTool,
    fields: schemas.ToolFields,
    *,
    extra: Optional[Dict[str, Any]] = None,
    actor_user_id: Optional[uuid.UUID],
) -> models.BrandTool:
    data = fields.model_dump(exclude_unset=True)
    data.update(extra or {})
    for key, value in data.items():
        setattr(tool, key, value)
    tool.updated_by = actor_user_id
    db.commit()
    db.refresh(tool)
    return tool


def upsert_by_slug(db: Session, *, slug: str, values: Dict[str, Any]) -> models.BrandTool:
    """Create or overwrite a tool by slug (used by the seeding CLI)."""
    tool = get_by_slug(db, slug, active_only=False)
    if tool is None:
        return create_tool(db, values={**values, "slug": slug}, actor_user_id=None)
    for key, value in values.items():
        setattr(tool, key, value)
    db.commit()
    db.refresh(tool)
    return tool


def delete_tool(db: Session, tool: models.BrandTool) -> None:
    db.delete(tool)
    db.commit()


def reorder_tools(db: Session, items: Iterable[schemas.ReorderItem]) -> int:
    updated = 0
    for item in items:
        updated += (
            db.query(models.BrandTool)
            .filter(models.BrandTool.id == item.id)
            .update({models.BrandTool.order_index: item.order_index}, synchronize_session=False)
        )
    db.commit()
    return updated
