"""
Brand asset API endpoints.

Public read access for the guidelines site and embedded tools; multipart
create/update, file management and ordering for admins.
"""
import logging
import uuid
from typing import Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse, StreamingResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from brandhub.api.deps import parse_reorder_items, require_admin
from brandhub.api.uploads import (
    first_processable_image,
    generate_and_store_preview,
    parse_tags,
    read_single_upload,
    read_uploads,
    store_files,
    store_preview,
)
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import assets as asset_repo
from brandhub.db.repositories import colors as color_repo
from brandhub.services.storage import StorageService, get_storage_service
from brandhub.utils.images import Padding
from brandhub.utils.uploads import IMAGE_EXTENSIONS, MAX_BULK_LOGO_FILES, get_file_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assets", tags=["assets"])

BULK_LOGO_PREVIEW = {"width": 640, "height": 480, "padding": Padding(left=80, right=80)}


def _validated_fields(**values) -> schemas.AssetFields:
    data = {k: v for k, v in values.items() if v is not None}
    try:
        return schemas.AssetFields.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


def _get_asset_or_404(db: Session, asset_id: uuid.UUID) -> models.BrandAsset:
    asset = asset_repo.get_asset(db, asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


def _tool_asset(asset: models.BrandAsset) -> schemas.ToolAsset:
    return schemas.ToolAsset(
        id=asset.id,
        title=asset.title,
        description=asset.description,
        preview_url=asset.preview_url,
        files=[schemas.ToolAssetFile(type=f.file_type, url=f.file_url) for f in asset.files],
    )


def _mutation(message: str, asset: models.BrandAsset) -> schemas.AssetMutationResponse:
    return schemas.AssetMutationResponse(message=message, asset=schemas.BrandAsset.model_validate(asset))


@router.get("/", response_model=List[schemas.BrandAsset])
def list_assets_endpoint(
    section: Optional[str] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return asset_repo.list_assets(db, section=section, category=category)


@router.get("/grouped", response_model=Dict[str, Dict[str, List[schemas.BrandAsset]]])
def grouped_assets_endpoint(db: Session = Depends(get_db)):
    return asset_repo.group_assets(asset_repo.list_active_by_order(db))


@router.get("/for-tools", response_model=schemas.AssetsForTools)
def assets_for_tools_endpoint(db: Session = Depends(get_db)):
    """Compact asset and color payload fetched by embedded brand tools."""
    grouped = {
        section: {category: [_tool_asset(a) for a in items] for category, items in categories.items()}
        for section, categories in asset_repo.group_assets(asset_repo.list_active_by_order(db)).items()
    }
    imagery = grouped.get("imagery", {})
    return schemas.AssetsForTools(
        assets=grouped,
        colors=color_repo.flatten_colors(color_repo.list_palettes(db, active_only=False)),
        imagery=imagery.get("imagery", []),
        icons=imagery.get("icons", []),
        patterns=imagery.get("patterns", []),
        logos=grouped.get("logos", {}),
    )


@router.put("/reorder")
def reorder_assets_endpoint(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    items = parse_reorder_items(payload)
    updated = asset_repo.reorder_assets(db, items)
    audit_log(
        db,
        action=AuditAction.ASSET_REORDER,
        target_type="asset",
        actor_user_id=user.id,
        metadata={"count": updated},
    )
    return {"message": "Assets reordered successfully", "updated": updated}


@router.post("/bulk-logo", response_model=schemas.AssetMutationResponse, status_code=status.HTTP_201_CREATED)
def bulk_logo_upload_endpoint(
    title: str = Form(...),
    category: str = Form("logo-primary"),
    description: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    logo_files: List[UploadFile] = File(default=[]),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Logo title is required")
    fields = _validated_fields(title=title, category=category or "logo-primary", section="logos", description=description)
    uploads = read_uploads(logo_files, max_files=MAX_BULK_LOGO_FILES)
    if not uploads:
        raise HTTPException(status_code=400, detail="No files uploaded")

    records = store_files(storage, uploads, f"logos/{fields.category}")
    preview = None
    source = first_processable_image(uploads, prefer=".png")
    if source is not None:
        preview = generate_and_store_preview(storage, source, **BULK_LOGO_PREVIEW)

    asset = asset_repo.create_asset(
        db,
        title=title,
        category=fields.category,
        section="logos",
        files=records,
        description=description or f"{title} logo in multiple file formats",
        preview_url=preview.public_url if preview else None,
        preview_storage_path=preview.path if preview else None,
        tags=parse_tags(tags),
        actor_user_id=user.id,
    )
    logger.info("bulk_logo_uploaded: asset=%s files=%d", asset.id, len(records))
    audit_log(
        db,
        action=AuditAction.ASSET_CREATE,
        target_type="asset",
        target_id=asset.id,
        actor_user_id=user.id,
        metadata={"title": asset.title, "category": asset.category, "files": len(records)},
    )
    return _mutation(f"Successfully uploaded {len(records)} file variants", asset)


@router.get("/{asset_id}", response_model=schemas.BrandAsset)
def get_asset_endpoint(asset_id: uuid.UUID, db: Session = Depends(get_db)):
    return _get_asset_or_404(db, asset_id)


@router.get("/{asset_id}/download/{file_index}")
def download_asset_file_endpoint(
    asset_id: uuid.UUID,
    file_index: int,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    asset = _get_asset_or_404(db, asset_id)
    if file_index < 0 or file_index >= len(asset.files):
        raise HTTPException(status_code=400, detail="Invalid file index")
    asset_file = asset.files[file_index]

    if asset_file.storage_path:
        handle = storage.open_download(asset_file.storage_path)
        if handle is None:
            logger.error("download_missing_object: asset=%s path=%s", asset.id, asset_file.storage_path)
            raise HTTPException(status_code=404, detail="File not found in storage")
        headers = {
            "Content-Disposition": f'attachment; filename="{handle.filename}"',
            "Cache-Control": "no-cache",
        }
        if handle.size is not None:
            headers["Content-Length"] = str(handle.size)
        return StreamingResponse(handle.chunks, media_type=handle.content_type, headers=headers)

    if asset_file.file_url and asset_file.file_url.startswith("http"):
        return RedirectResponse(asset_file.file_url, status_code=302)

    logger.error("download_unavailable: asset=%s file=%s", asset.id, asset_file.id)
    raise HTTPException(status_code=404, detail="File download not available. Please re-upload this asset.")


@router.post("/", response_model=schemas.AssetMutationResponse, status_code=status.HTTP_201_CREATED)
def create_asset_endpoint(
    response: Response,
    title: str = Form(...),
    category: str = Form(...),
    section: str = Form(...),
    description: Optional[str] = Form(None),
    preview_type: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    files: List[UploadFile] = File(default=[]),
    preview: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    fields = _validated_fields(
        title=title,
        category=category,
        section=section,
        description=description,
        preview_type=preview_type,
    )
    uploads = read_uploads(files)
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)

    existing = asset_repo.find_by_title_and_category(db, title, fields.category)
    if existing:
        existing_types = {f.file_type for f in existing.files}
        duplicates = []
        for upload in uploads:
            file_type = get_file_type(upload.content_type, upload.filename)
            if file_type in existing_types and file_type not in duplicates:
                duplicates.append(file_type)
        if duplicates:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Duplicate file type(s): {', '.join(duplicates)} already exist for \"{title}\". "
                    "Remove the existing file type first or upload a different format."
                ),
            )

    records = store_files(storage, uploads, f"assets/{fields.category}")
    stored_preview = None
    if preview_upload is not None:
        stored_preview = store_preview(storage, preview_upload)
    elif uploads and (existing is None or not existing.preview_url):
        source = first_processable_image(uploads[:1])
        if source is not None:
            stored_preview = generate_and_store_preview(storage, source)

    if existing:
        added = asset_repo.add_files(db, existing, records, actor_user_id=user.id)
        if stored_preview and not existing.preview_url:
            asset_repo.set_preview(
                db,
                existing,
                preview_url=stored_preview.public_url,
                preview_storage_path=stored_preview.path,
            )
        elif stored_preview:
            storage.delete_quietly(stored_preview.path)
        if description and not existing.description:
            existing = asset_repo.update_asset(
                db, existing, schemas.AssetFields(description=description), actor_user_id=user.id
            )
        audit_log(
            db,
            action=AuditAction.ASSET_MERGE,
            target_type="asset",
            target_id=existing.id,
            actor_user_id=user.id,
            metadata={"title": existing.title, "files": added},
        )
        response.status_code = status.HTTP_200_OK
        return _mutation(f"Added {added} file(s) to existing asset \"{title}\"", existing)

    asset = asset_repo.create_asset(
        db,
        title=title,
        category=fields.category,
        section=fields.section,
        files=records,
        description=description,
        preview_url=stored_preview.public_url if stored_preview else None,
        preview_storage_path=stored_preview.path if stored_preview else None,
        preview_type=fields.preview_type or "image",
        tags=parse_tags(tags),
        actor_user_id=user.id,
    )
    audit_log(
        db,
        action=AuditAction.ASSET_CREATE,
        target_type="asset",
        target_id=asset.id,
        actor_user_id=user.id,
        metadata={"title": asset.title, "category": asset.category, "files": len(records)},
    )
    return _mutation("Asset created", asset)


@router.put("/{asset_id}", response_model=schemas.AssetMutationResponse)
def update_asset_endpoint(
    asset_id: uuid.UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    section: Optional[str] = Form(None),
    preview_type: Optional[str] = Form(None),
    page_count: Optional[int] = Form(None),
    order_index: Optional[int] = Form(None),
    tags: Optional[List[str]] = Form(None),
    files: List[UploadFile] = File(default=[]),
    preview: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    asset = _get_asset_or_404(db, asset_id)
    fields = _validated_fields(
        title=(title.strip() or None) if title is not None else None,
        description=description,
        category=category or None,
        section=section or None,
        preview_type=preview_type or None,
        page_count=page_count,
        order_index=order_index,
        tags=parse_tags(tags),
    )
    uploads = read_uploads(files)
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)

    asset = asset_repo.update_asset(db, asset, fields, actor_user_id=user.id)
    if uploads:
        asset_repo.add_files(db, asset, store_files(storage, uploads, f"assets/{asset.category}"), actor_user_id=user.id)
    if preview_upload is not None:
        old_path = asset.preview_storage_path
        stored = store_preview(storage, preview_upload)
        asset = asset_repo.set_preview(db, asset, preview_url=stored.public_url, preview_storage_path=stored.path)
        storage.delete_quietly(old_path)

    audit_log(
        db,
        action=AuditAction.ASSET_UPDATE,
        target_type="asset",
        target_id=asset.id,
        actor_user_id=user.id,
        metadata={"fields": sorted(fields.model_dump(exclude_unset=True)), "files_added": len(uploads)},
    )
    return _mutation("Asset updated", asset)


@router.delete("/{asset_id}/files/{file_id}")
def delete_asset_file_endpoint(
    asset_id: uuid.UUID,
    file_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    asset = _get_asset_or_404(db, asset_id)
    removed = asset_repo.remove_file(db, asset, file_id, actor_user_id=user.id)
    if removed is None:
        raise HTTPException(status_code=404, detail="File not found")
    storage.delete_quietly(removed.storage_path)
    audit_log(
        db,
        action=AuditAction.ASSET_FILE_DELETE,
        target_type="asset",
        target_id=asset.id,
        actor_user_id=user.id,
        metadata={"file_id": str(file_id), "file_type": removed.file_type},
    )
    return {"message": "File deleted successfully"}


@router.delete("/{asset_id}")
def delete_asset_endpoint(
    asset_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    asset = _get_asset_or_404(db, asset_id)
    paths = [f.storage_path for f in asset.files] + [asset.preview_storage_path]
    title = asset.title
    asset_repo.delete_asset(db, asset)
    for path in paths:
        storage.delete_quietly(path)
    audit_log(
        db,
        action=AuditAction.ASSET_DELETE,
        target_type="asset",
        target_id=asset_id,
        actor_user_id=user.id,
        metadata={"title": title},
    )
    return {"message": "Asset deleted successfully"}
