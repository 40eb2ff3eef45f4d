"""
Brand configuration API endpoints (homepage hero image, description, settings).
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from brandhub.api.deps import require_admin
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import assets as asset_repo
from brandhub.db.repositories import brand_config as config_repo

router = APIRouter(prefix="/api/brand-config", tags=["brand-config"])


@router.get("/", response_model=schemas.BrandConfig)
def get_brand_config_endpoint(db: Session = Depends(get_db)):
    config = config_repo.get_config(db)
    if config is None:
        return schemas.BrandConfig(key=models.BRAND_CONFIG_KEY)
    return config


@router.put("/", response_model=schemas.BrandConfig)
def update_brand_config_endpoint(
    payload: schemas.BrandConfigUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    try:
        config = config_repo.upsert_config(db, payload, actor_user_id=user.id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Asset not found")
    audit_log(
        db,
        action=AuditAction.BRAND_CONFIG_UPDATE,
        target_type="brand_config",
        target_id=config.id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return config


@router.get("/imagery-options", response_model=List[schemas.BrandAsset])
def imagery_options_endpoint(
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    return asset_repo.list_imagery_options(db)
