"""
Brand tool API endpoints.

Tools are admin-authored HTML/CSS/JS pages served at ``/tools/{slug}``. The
code fields are only returned to admins; everyone else gets the listing shape.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from brandhub.api.deps import get_optional_user_context, parse_reorder_items, require_admin
from brandhub.api.uploads import parse_bool, read_single_upload
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import tools as tool_repo
from brandhub.services.storage import StorageService, get_storage_service
from brandhub.utils.uploads import IMAGE_EXTENSIONS

router = APIRouter(prefix="/api/tools", tags=["tools"])

TOOL_PREVIEW_FOLDER = "tool-previews"
INVALID_SLUG = "Slug can only contain lowercase letters, numbers, and hyphens"
DUPLICATE_SLUG = "A tool with this slug already exists"


def _is_admin(current_user) -> bool:
    return bool(current_user and current_user.get("is_admin"))


def _validated_fields(**values) -> schemas.ToolFields:
    data = {k: v for k, v in values.items() if v is not None}
    try:
        return schemas.ToolFields.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


def _get_tool_or_404(db: Session, tool_id: uuid.UUID) -> models.BrandTool:
    tool = tool_repo.get_tool(db, tool_id)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


@router.get("/", response_model=List[schemas.BrandToolSummary])
def list_tools_endpoint(
    db: Session = Depends(get_db),
    user_context=Depends(get_optional_user_context),
):
    _, current_user = user_context
    return tool_repo.list_tools(db, include_inactive=_is_admin(current_user))


@router.put("/reorder")
def reorder_tools_endpoint(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    updated = tool_repo.reorder_tools(db, parse_reorder_items(payload))
    audit_log(
        db,
        action=AuditAction.TOOL_REORDER,
        target_type="tool",
        actor_user_id=user.id,
        metadata={"count": updated},
    )
    return {"message": "Tools reordered successfully", "updated": updated}


@router.get("/slug/{slug}", response_model=schemas.BrandTool)
def get_tool_by_slug_endpoint(slug: str, db: Session = Depends(get_db)):
    tool = tool_repo.get_by_slug(db, slug)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


@router.get("/{tool_id}", response_model=None)
def get_tool_endpoint(
    tool_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_optional_user_context),
):
    _, current_user = user_context
    tool = _get_tool_or_404(db, tool_id)
    if _is_admin(current_user):
        return schemas.BrandTool.model_validate(tool)
    # Inactive tools are invisible to everyone but admins
    if not tool.is_active:
        raise HTTPException(status_code=404, detail="Tool not found")
    return schemas.BrandToolSummary.model_validate(tool)


@router.post("/", response_model=schemas.BrandTool, status_code=status.HTTP_201_CREATED)
def create_tool_endpoint(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    html_code: Optional[str] = Form(None),
    css_code: Optional[str] = Form(None),
    js_code: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    preview: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    slug = (slug or "").strip() or tool_repo.slugify(title)
    if not tool_repo.is_valid_slug(slug):
        raise HTTPException(status_code=400, detail=INVALID_SLUG)
    if tool_repo.slug_taken(db, slug):
        raise HTTPException(status_code=400, detail=DUPLICATE_SLUG)

    fields = _validated_fields(
        title=title,
        description=description,
        slug=slug,
        html_code=html_code or "",
        css_code=css_code or "",
        js_code=js_code or "",
        is_active=parse_bool(is_active, default=True),
    )
    values = fields.model_dump(exclude_unset=True)
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)
    if preview_upload is not None:
        stored = storage.upload(preview_upload.data, preview_upload.filename, preview_upload.content_type, TOOL_PREVIEW_FOLDER)
        values.update(preview_url=stored.public_url, preview_storage_path=stored.path)

    tool = tool_repo.create_tool(db, values=values, actor_user_id=user.id)
    audit_log(
        db,
        action=AuditAction.TOOL_CREATE,
        target_type="tool",
        target_id=tool.id,
        actor_user_id=user.id,
        metadata={"title": tool.title, "slug": tool.slug},
    )
    return tool


@router.put("/{tool_id}", response_model=schemas.BrandTool)
def update_tool_endpoint(
    tool_id: uuid.UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    html_code: Optional[str] = Form(None),
    css_code: Optional[str] = Form(None),
    js_code: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    order_index: Optional[int] = Form(None),
    preview: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    tool = _get_tool_or_404(db, tool_id)
    slug = (slug or "").strip() or None
    if slug and slug != tool.slug:
        if not tool_repo.is_valid_slug(slug):
            raise HTTPException(status_code=400, detail=INVALID_SLUG)
        if tool_repo.slug_taken(db, slug, exclude_id=tool.id):
            raise HTTPException(status_code=400, detail=DUPLICATE_SLUG)

    fields = _validated_fields(
        title=(title.strip() or None) if title is not None else None,
        description=description,
        slug=slug,
        html_code=html_code,
        css_code=css_code,
        js_code=js_code,
        is_active=parse_bool(is_active),
        order_index=order_index,
    )
    extra = {}
    old_preview = None
    preview_upload = read_single_upload(preview, allowed_extensions=IMAGE_EXTENSIONS)
    if preview_upload is not None:
        stored = storage.upload(preview_upload.data, preview_upload.filename, preview_upload.content_type, TOOL_PREVIEW_FOLDER)
        old_preview = tool.preview_storage_path
        extra.update(preview_url=stored.public_url, preview_storage_path=stored.path)

    tool = tool_repo.update_tool(db, tool, fields, extra=extra, actor_user_id=user.id)
    storage.delete_quietly(old_preview)
    audit_log(
        db,
        action=AuditAction.TOOL_UPDATE,
        target_type="tool",
        target_id=tool.id,
        actor_user_id=user.id,
        metadata={"slug": tool.slug, "fields": sorted(fields.model_dump(exclude_unset=True)) + sorted(extra)},
    )
    return tool


@router.delete("/{tool_id}")
def delete_tool_endpoint(
    tool_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    user_context=Depends(require_admin),
):
    user, _ = user_context
    tool = _get_tool_or_404(db, tool_id)
    preview_path = tool.preview_storage_path
    slug = tool.slug
    tool_repo.delete_tool(db, tool)
    storage.delete_quietly(preview_path)
    audit_log(
        db,
        action=AuditAction.TOOL_DELETE,
        target_type="tool",
        target_id=tool_id,
        actor_user_id=user.id,
        metadata={"slug": slug},
    )
    return {"message": "Tool deleted successfully"}
