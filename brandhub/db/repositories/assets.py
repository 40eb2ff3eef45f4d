"""
Brand asset repository functions.

Assets own an ordered list of file variants; positions are kept dense so the
download index stays stable for clients.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from brandhub.db import models, schemas


def list_assets(
    db: Session,
    *,
    section: Optional[str] = None,
    category: Optional[str] = None,
) -> List[models.BrandAsset]:
    query = db.query(models.BrandAsset).filter(models.BrandAsset.is_active.is_(True))
    if section:
        query = query.filter(models.BrandAsset.section == section)
    if category:
        query = query.filter(models.BrandAsset.category == category)
    return query.order_by(
        models.BrandAsset.section,
        models.BrandAsset.category,
        models.BrandAsset.order_index,
    ).all()


def list_active_by_order(db: Session) -> List[models.BrandAsset]:
    return (
        db.query(models.BrandAsset)
        .filter(models.BrandAsset.is_active.is_(True))
        .order_by(models.BrandAsset.order_index, models.BrandAsset.created_at)
        .all()
    )


def group_assets(assets: Iterable[models.BrandAsset]) -> Dict[str, Dict[str, List[models.BrandAsset]]]:
    """Group assets as {section: {category: [asset, ...]}} preserving order."""
    grouped: Dict[str, Dict[str, List[models.BrandAsset]]] = {}
    for asset in assets:
        grouped.setdefault(asset.section, {}).setdefault(asset.category, []).append(asset)
    return grouped


def get_asset(db: Session, asset_id: uuid.UUID) -> Optional[models.BrandAsset]:
    return db.query(models.BrandAsset).filter(models.BrandAsset.id == asset_id).first()


def find_by_title_and_category(db: Session, title: str, category: str) -> Optional[models.BrandAsset]:
    return (
        db.query(models.BrandAsset)
        .filter(models.BrandAsset.title == title, models.BrandAsset.category == category)
        .first()
    )


def next_order_index(db: Session, category: str) -> int:
    current = (
        db.query(func.max(models.BrandAsset.order_index))
        .filter(models.BrandAsset.category == category)
        .scalar()
    )
    return (current or 0) + 1


def _append_files(asset: models.BrandAsset, files: Iterable[Dict[str, Any]]) -> int:
    position = max((f.position for f in asset.files), default=-1) + 1
    added = 0
    for item in files:
        asset.files.append(
            models.AssetFile(
                file_type=item["file_type"],
                file_url=item["file_url"],
                storage_path=item.get("storage_path"),
                file_size=item.get("file_size"),
                position=position,
            )
        )
        position += 1
        added += 1
    return added


def create_asset(
    db: Session,
    *,
    title: str,
    category: str,
    section: str,
    files: Iterable[Dict[str, Any]],
    actor_user_id: Optional[uuid.UUID],
    description: Optional[str] = None,
    preview_url: Optional[str] = None,
    preview_storage_path: Optional[str] = None,
    preview_type: str = "image",
    tags: Optional[List[str]] = None,
    order_index: Optional[int] = None,
) -> models.BrandAsset:
    asset = models.BrandAsset(
        title=title,
        description=description,
        category=category,
        section=section,
        preview_url=preview_url,
        preview_storage_path=preview_storage_path,
        preview_type=preview_type,
        tags=list(tags or []),
        order_index=order_index if order_index is not None else next_order_index(db, category),
        created_by=actor_user_id,
        updated_by=actor_user_id,
    )
    _append_files(asset, files)
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def add_files(
    db: Session,
    asset: models.BrandAsset,
    files: Iterable[Dict[str, Any]],
    *,
    actor_user_id: Optional[uuid.UUID],
) -> int:
    added = _append_files(asset, files)
    asset.updated_by = actor_user_id
    db.commit()
    db.refresh(asset)
    return added


def update_asset(
    db: Session,
    asset: models.BrandAsset,
    fields: schemas.AssetFields,
    *,
    actor_user_id: Optional[uuid.UUID],
) -> models.BrandAsset:
    data = fields.model_dump(exclude_unset=True)
    for key, value in data.items():
        if value is None and key not in ("description",):
            continue
        setattr(asset, key, value)
    asset.updated_by = actor_user_id
    db.commit()
    db.refresh(asset)
    return asset


def set_preview(
    db: Session,
    asset: models.BrandAsset,
    *,
    preview_url: Optional[str],
    preview_storage_path: Optional[str],
) -> models.BrandAsset:
    asset.preview_url = preview_url
    asset.preview_storage_path = preview_storage_path
    db.commit()
    db.refresh(asset)
    return asset


def remove_file(
    db: Session,
    asset: models.BrandAsset,
    file_id: uuid.UUID,
    *,
    actor_user_id: Optional[uuid.UUID],
) -> Optional[models.AssetFile]:
    target = next((f for f in asset.files if f.id == file_id), None)
    if target is None:
        return None
    asset.files.remove(target)
    for position, remaining in enumerate(asset.files):
        remaining.position = position
    asset.updated_by = actor_user_id
    db.commit()
    db.refresh(asset)
    return target


def delete_asset(db: Session, asset: models.BrandAsset) -> None:
    db.delete(asset)
    db.commit()


def reorder_assets(db: Session, items: Iterable[schemas.ReorderItem]) -> int:
    updated = 0
    for item in items:
        updated += (
            db.query(models.BrandAsset)
            .filter(models.BrandAsset.id == item.id)
            .update({models.BrandAsset.order_index: item.order_index}, synchronize_session=False)
        )
    db.commit()
    return updated


def list_imagery_options(db: Session) -> List[models.BrandAsset]:
    return (
        db.query(models.BrandAsset)
        .filter(
            models.BrandAsset.is_active.is_(True),
            models.BrandAsset.section == "imagery",
            models.BrandAsset.category.in_(("imagery", "patterns")),
        )
        .order_by(models.BrandAsset.order_index)
        .all()
    )


def get_primary_logo(db: Session) -> Optional[models.BrandAsset]:
    return (
        db.query(models.BrandAsset)
        .filter(models.BrandAsset.category == "logo-primary", models.BrandAsset.is_active.is_(True))
        .order_by(models.BrandAsset.order_index)
        .first()
    )


def display_url(asset: models.BrandAsset) -> Optional[str]:
    """Preview URL, else the first file URL."""
    if asset.preview_url:
        return asset.preview_url
    if asset.files:
        return asset.files[0].file_url
    return None
