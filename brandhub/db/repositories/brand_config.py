"""Singleton brand configuration repository."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from brandhub.db import models, schemas
from brandhub.db.repositories import assets as asset_repo


def get_config(db: Session) -> Optional[models.BrandConfig]:
    return db.query(models.BrandConfig).filter(models.BrandConfig.key == models.BRAND_CONFIG_KEY).first()


def upsert_config(
    db: Session,
    payload: schemas.BrandConfigUpdate,
    *,
    actor_user_id: Optional[uuid.UUID],
) -> models.BrandConfig:
    """Create or partially update the singleton config.

    Setting the hero image id resolves its display URL from the asset;
    clearing it clears the URL.
    """
    config = get_config(db)
    if config is None:
        config = models.BrandConfig(key=models.BRAND_CONFIG_KEY, settings={})
        db.add(config)

    data = payload.model_dump(exclude_unset=True)
    if "homepage_hero_image_id" in data:
        hero_id = data["homepage_hero_image_id"]
        if hero_id is None:
            config.homepage_hero_image_id = None
            config.homepage_hero_image_url = None
        else:
            asset = asset_repo.get_asset(db, hero_id)
            if asset is None:
                raise LookupError("Hero image asset not found")
            config.homepage_hero_image_id = asset.id
            config.homepage_hero_image_url = asset_repo.display_url(asset)
    if "description" in data:
        config.description = data["description"]
    if data.get("settings") is not None:
        config.settings = dict(data["settings"])
    config.updated_by = actor_user_id
    db.commit()
    db.refresh(config)
    return config
