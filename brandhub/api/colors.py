"""
Color palette API endpoints.

One palette per category (primary, secondary, tertiary); admins manage the
palette metadata and its ordered colors.
"""
import uuid
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brandhub.api.deps import parse_reorder_items, require_admin
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import colors as color_repo

router = APIRouter(prefix="/api/colors", tags=["colors"])


def _get_palette_or_404(db: Session, category: str) -> models.ColorPalette:
    palette = color_repo.get_palette(db, category)
    if not palette:
        raise HTTPException(status_code=404, detail="Color palette not found")
    return palette


def _get_color_or_404(palette: models.ColorPalette, color_id: uuid.UUID) -> models.PaletteColor:
    color = color_repo.get_color(palette, color_id)
    if not color:
        raise HTTPException(status_code=404, detail="Color not found")
    return color


@router.get("/", response_model=List[schemas.ColorPalette])
def list_palettes_endpoint(db: Session = Depends(get_db)):
    return color_repo.list_palettes(db)


@router.get("/{category}", response_model=schemas.ColorPalette)
def get_palette_endpoint(category: str, db: Session = Depends(get_db)):
    return _get_palette_or_404(db, category)


@router.post("/", response_model=schemas.ColorPalette)
def upsert_palette_endpoint(
    payload: schemas.PaletteUpsert,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    if payload.category not in models.PALETTE_CATEGORIES:
        raise HTTPException(status_code=400, detail="Invalid category")
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    palette = color_repo.upsert_palette(db, payload)
    audit_log(
        db,
        action=AuditAction.PALETTE_UPSERT,
        target_type="palette",
        target_id=palette.id,
        actor_user_id=user.id,
        metadata={"category": palette.category, "colors": len(palette.colors)},
    )
    return palette


@router.put("/{category}", response_model=schemas.ColorPalette)
def update_palette_endpoint(
    category: str,
    payload: schemas.PaletteUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    palette = color_repo.update_palette(db, _get_palette_or_404(db, category), payload)
    audit_log(
        db,
        action=AuditAction.PALETTE_UPDATE,
        target_type="palette",
        target_id=palette.id,
        actor_user_id=user.id,
        metadata={"category": category, "fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return palette


@router.post("/{category}/color", response_model=schemas.Color, status_code=status.HTTP_201_CREATED)
def add_color_endpoint(
    category: str,
    payload: schemas.ColorCreate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    palette = _get_palette_or_404(db, category)
    color = color_repo.add_color(db, palette, payload.model_dump())
    audit_log(
        db,
        action=AuditAction.COLOR_CREATE,
        target_type="color",
        target_id=color.id,
        actor_user_id=user.id,
        metadata={"category": category, "name": color.name, "hex": color.hex},
    )
    return color


@router.put("/{category}/color/{color_id}", response_model=schemas.Color)
def update_color_endpoint(
    category: str,
    color_id: uuid.UUID,
    payload: schemas.ColorUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    palette = _get_palette_or_404(db, category)
    color = color_repo.update_color(db, _get_color_or_404(palette, color_id), payload)
    audit_log(
        db,
        action=AuditAction.COLOR_UPDATE,
        target_type="color",
        target_id=color.id,
        actor_user_id=user.id,
        metadata={"category": category, "fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return color


@router.delete("/{category}/color/{color_id}")
def delete_color_endpoint(
    category: str,
    color_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    palette = _get_palette_or_404(db, category)
    color = _get_color_or_404(palette, color_id)
    name = color.name
    color_repo.delete_color(db, palette, color)
    audit_log(
        db,
        action=AuditAction.COLOR_DELETE,
        target_type="color",
        target_id=color_id,
        actor_user_id=user.id,
        metadata={"category": category, "name": name},
    )
    return {"message": "Color deleted successfully"}


@router.put("/{category}/reorder", response_model=schemas.ColorPalette)
def reorder_colors_endpoint(
    category: str,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    items = parse_reorder_items(payload)
    palette = color_repo.reorder_colors(db, _get_palette_or_404(db, category), items)
    audit_log(
        db,
        action=AuditAction.COLOR_REORDER,
        target_type="palette",
        target_id=palette.id,
        actor_user_id=user.id,
        metadata={"category": category, "count": len(items)},
    )
    return palette
