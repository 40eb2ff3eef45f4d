"""
Template library API endpoints.

Templates point at an uploaded file, an external link (Figma, Google Slides),
or both.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from brandhub.api.deps import parse_reorder_items, require_admin
from brandhub.api.uploads import parse_bool, parse_tags, read_single_upload, store_preview
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import templates as template_repo
from brandhub.services.storage import StorageService, get_storage_service
from brandhub.utils.uploads import IMAGE_EXTENSIONS

router = APIRouter(prefix="/api/templates", tags=["templates"])

TEMPLATE_FOLDER = "templates"
SIGNED_URL_MINUTES = 60


def _validated_fields(**values) -> schemas.TemplateFields:
    data = {k: v for k, v in values.items() if v is not None}
    try:
        return schemas.TemplateFields.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


def _get_template_or_404(db: Session, template_id: uuid.UUID) -> models.BrandTemplate:
    template = template_repo.get_template(db, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("/", response_model=List[schemas.BrandTemplate])
def list_templates_endpoint(
    tag: Optional[List[str]] = Query(None),
    template_type: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
):
    return template_repo.list_templates(db, tags=tag, template_type=template_type)


@router.get("/tags", response_model=List[str])
def list_tags_endpoint(db: Session = Depends(get_db)):
    return template_repo.list_tags(db)


@router.put("/reorder")
def reorder_templates_endpoint(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    updated = template_repo.reorder_templates(db, parse_reorder_items(payload))
    audit_log(
        db,
        action=AuditAction.TEMPLATE_REORDER,
        target_type="template",
        actor_user_id=user.id,
        metadata={"count": updated},
    )
    return {"message": "Templates reordered successfully", "updated": updated}


@router.get("/{template_id}", response_model=schemas.BrandTemplate)
def get_template_endpoint(template_id: uuid.UUID, db: Session = Depends(get_db)):
    return _get_template_or_404(db, template_id)


@router.get("/{template_id}/download", response_model=schemas.TemplateDownload)
def download_template_endpoint(
    template_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    template = _get_template_or_404(db, template_id)
    if not template.file_url and not template.external_link:
        raise HTTPException(status_code=400, detail="Template has no downloadable file")
    if template.storage_path and storage.is_configured():
        url = storage.generate_signed_url(template.storage_path, SIGNED_URL_MINUTES)
        return schemas.TemplateDownload(url=url, expires_in=SIGNED_URL_MINUTES)
    return schemas.TemplateDownload(url=template.external_link or template.file_url, expires_in=None)


@router.post("/", response_model=schemas.BrandTemplate, status_code=status.HTTP_201_CREATED)
def create_template_endpoint(
    title: str = Form(...),
    template_type: str = Form(...),
    description: Optional[str] = Form(None),
    external_link: Optional[str] = Form(None),
    preview_type: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    file: Optional[UploadFile] = File(None),
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
        template_type=template_type,
        description=description,
        external_link=external_link or None,
        preview_type=preview_type or None,
        tags=parse_tags(tags) or [],
    )
    template_upload = read_single_upload(file)
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)

    values = fields.model_dump(exclude_unset=True)
    if template_upload is not None:
        stored = storage.upload(template_upload.data, template_upload.filename, template_upload.content_type, TEMPLATE_FOLDER)
        values.update(file_url=stored.public_url, storage_path=stored.path, file_size=template_upload.size)
    if preview_upload is not None:
        stored_preview = store_preview(storage, preview_upload)
        values.update(preview_url=stored_preview.public_url, preview_storage_path=stored_preview.path)

    template = template_repo.create_template(db, values=values, actor_user_id=user.id)
    audit_log(
        db,
        action=AuditAction.TEMPLATE_CREATE,
        target_type="template",
        target_id=template.id,
        actor_user_id=user.id,
        metadata={"title": template.title, "template_type": template.template_type},
    )
    return template


@router.put("/{template_id}", response_model=schemas.BrandTemplate)
def update_template_endpoint(
    template_id: uuid.UUID,
    title: Optional[str] = Form(None),
    template_type: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    external_link: Optional[str] = Form(None),
    preview_type: Optional[str] = Form(None),
    order_index: Optional[int] = Form(None),
    is_active: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    file: Optional[UploadFile] = File(None),
    preview: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    template = _get_template_or_404(db, template_id)
    fields = _validated_fields(
        title=(title.strip() or None) if title is not None else None,
        template_type=template_type or None,
        description=description,
        external_link=external_link,
        preview_type=preview_type or None,
        order_index=order_index,
        is_active=parse_bool(is_active),
        tags=parse_tags(tags),
    )
    template_upload = read_single_upload(file)
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)

    extra = {}
    stale_paths = []
    if template_upload is not None:
        stored = storage.upload(template_upload.data, template_upload.filename, template_upload.content_type, TEMPLATE_FOLDER)
        stale_paths.append(template.storage_path)
        extra.update(file_url=stored.public_url, storage_path=stored.path, file_size=template_upload.size)
    if preview_upload is not None:
        stored_preview = store_preview(storage, preview_upload)
        stale_paths.append(template.preview_storage_path)
        extra.update(preview_url=stored_preview.public_url, preview_storage_path=stored_preview.path)

    template = template_repo.update_template(db, template, fields, extra=extra, actor_user_id=user.id)
    for path in stale_paths:
        storage.delete_quietly(path)
    audit_log(
        db,
        action=AuditAction.TEMPLATE_UPDATE,
        target_type="template",
        target_id=template.id,
        actor_user_id=user.id,
        metadata={"fields": sorted(fields.model_dump(exclude_unset=True)) + sorted(extra)},
    )
    return template


@router.delete("/{template_id}")
def delete_template_endpoint(
    template_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    template = _get_template_or_404(db, template_id)
    paths = [template.storage_path, template.preview_storage_path]
    title = template.title
    template_repo.delete_template(db, template)
    for path in paths:
        storage.delete_quietly(path)
    audit_log(
        db,
        action=AuditAction.TEMPLATE_DELETE,
        target_type="template",
        target_id=template_id,
        actor_user_id=user.id,
        metadata={"title": title},
    )
    return {"message": "Template deleted successfully"}
