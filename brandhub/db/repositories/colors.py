"""
Color palette repository functions.

One palette per category; colors are ordered within their palette.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from brandhub.db import models, schemas
from brandhub.utils.colors import hex_to_rgb


def list_palettes(db: Session, *, active_only: bool = True) -> List[models.ColorPalette]:
    query = db.query(models.ColorPalette)
    if active_only:
        query = query.filter(models.ColorPalette.is_active.is_(True))
    return query.order_by(models.ColorPalette.order_index, models.ColorPalette.category).all()


def get_palette(db: Session, category: str) -> Optional[models.ColorPalette]:
    return db.query(models.ColorPalette).filter(models.ColorPalette.category == category).first()


def _color_values(payload: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(payload)
    if values.get("rgb") is None and values.get("hex"):
        values["rgb"] = hex_to_rgb(values["hex"])
    return values


def _next_color_order(palette: models.ColorPalette) -> int:
    return max((c.order_index or 0 for c in palette.colors), default=0) + 1


def upsert_palette(db: Session, payload: schemas.PaletteUpsert) -> models.ColorPalette:
    palette = get_palette(db, payload.category)
    if palette is None:
        palette = models.ColorPalette(category=payload.category, title=payload.title)
        db.add(palette)
    palette.title = payload.title
    palette.description = payload.description
    if payload.order_index is not None:
        palette.order_index = payload.order_index
    if payload.colors is not None:
        palette.colors.clear()
        for index, color in enumerate(payload.colors):
            palette.colors.append(models.PaletteColor(order_index=index, **_color_values(color.model_dump())))
    db.commit()
    db.refresh(palette)
    return palette


def ensure_palette(db: Session, category: str, title: str) -> models.ColorPalette:
    palette = get_palette(db, category)
    if palette is None:
        palette = models.ColorPalette(category=category, title=title)
        db.add(palette)
        db.commit()
        db.refresh(palette)
    return palette


def update_palette(db: Session, palette: models.ColorPalette, payload: schemas.PaletteUpdate) -> models.ColorPalette:
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(palette, key, value)
    db.commit()
    db.refresh(palette)
    return palette


def add_color(db: Session, palette: models.ColorPalette, payload: Dict[str, Any]) -> models.PaletteColor:
    color = models.PaletteColor(order_index=_next_color_order(palette), **_color_values(payload))
    palette.colors.append(color)
    db.commit()
    db.refresh(color)
    return color


def get_color(palette: models.ColorPalette, color_id: uuid.UUID) -> Optional[models.PaletteColor]:
    return next((c for c in palette.colors if c.id == color_id), None)


def update_color(db: Session, color: models.PaletteColor, payload: schemas.ColorUpdate) -> models.PaletteColor:
    data = payload.model_dump(exclude_unset=True)
    if "hex" in data and "rgb" not in data and data["hex"]:
        data["rgb"] = hex_to_rgb(data["hex"])
    for key, value in data.items():
        setattr(color, key, value)
    db.commit()
    db.refresh(color)
    return color


def delete_color(db: Session, palette: models.ColorPalette, color: models.PaletteColor) -> None:
    palette.colors.remove(color)
    db.commit()


def reorder_colors(db: Session, palette: models.ColorPalette, items: Iterable[schemas.ReorderItem]) -> models.ColorPalette:
    by_id = {c.id: c for c in palette.colors}
    for item in items:
        color = by_id.get(item.id)
        if color is not None:
            color.order_index = item.order_index
    db.commit()
    db.expire(palette, ["colors"])
    db.refresh(palette)
    return palette


def flatten_colors(palettes: Iterable[models.ColorPalette]) -> List[models.PaletteColor]:
    flat: List[models.PaletteColor] = []
    for palette in palettes:
        flat.extend(palette.colors)
    return flat
