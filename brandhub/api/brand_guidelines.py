"""
Brand guideline import endpoints (admin).

A guidelines PDF or a set of screenshots is run through the extraction model
and the result is written into palettes and content sections.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from brandhub.api.deps import require_admin
from brandhub.api.uploads import read_single_upload, read_uploads
from brandhub.audit import AuditAction, log as audit_log
from brandhub.db.database import get_db
from brandhub.services.guidelines_service import (
    GuidelineExtractionError,
    SaveSummary,
    extract_from_images,
    extract_from_pdf,
    save_brand_guidelines,
)
from brandhub.services.llm import LLMClient, get_llm_client
from brandhub.utils.feature_flags import guideline_extraction_enabled, llm_features_enabled
from brandhub.utils.uploads import IMAGE_EXTENSIONS, PDF_EXTENSIONS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/brand-guidelines", tags=["brand-guidelines"])

MAX_GUIDELINE_FILE_SIZE = 50 * 1024 * 1024
MAX_GUIDELINE_IMAGES = 20
PROCESSING_FAILED = "Failed to process brand guidelines"


def _require_extraction(client: LLMClient) -> None:
    if not guideline_extraction_enabled():
        raise HTTPException(status_code=503, detail="Brand guideline extraction is disabled")
    if not client.is_configured():
        raise HTTPException(status_code=503, detail="ANTHROPIC_API_KEY is not configured")


def _processed(db: Session, user, extracted: Dict[str, Any], source: str, files: int) -> Dict[str, Any]:
    summary: SaveSummary = save_brand_guidelines(db, extracted)
    audit_log(
        db,
        action=AuditAction.GUIDELINES_IMPORT,
        target_type="brand_guidelines",
        actor_user_id=user.id,
        metadata={"source": source, "files": files, **summary.as_dict()},
    )
    return {
        "message": "Brand guidelines processed successfully",
        "extracted": extracted,
        "saved": summary.as_dict(),
    }


@router.post("/upload")
def upload_guidelines_pdf(
    pdf: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    client: LLMClient = Depends(get_llm_client),
):
    _require_extraction(client)
    user, _ = user_context
    upload = read_single_upload(pdf, max_size=MAX_GUIDELINE_FILE_SIZE, allowed_extensions=PDF_EXTENSIONS)
    if upload is None:
        raise HTTPException(status_code=400, detail="Please upload a PDF file")

    logger.info("guidelines_pdf_received: name=%s size=%d", upload.filename, upload.size)
    try:
        extracted = extract_from_pdf(client, upload.data)
    except GuidelineExtractionError as exc:
        logger.error("guidelines_pdf_failed: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail=PROCESSING_FAILED)
    return _processed(db, user, extracted, "pdf", 1)


@router.post("/upload-images")
def upload_guideline_images(
    images: List[UploadFile] = File(None),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    client: LLMClient = Depends(get_llm_client),
):
    _require_extraction(client)
    user, _ = user_context
    uploads = read_uploads(
        images,
        max_files=MAX_GUIDELINE_IMAGES,
        max_size=MAX_GUIDELINE_FILE_SIZE,
        allowed_extensions=IMAGE_EXTENSIONS,
    )
    if not uploads:
        raise HTTPException(status_code=400, detail="Please upload at least one image")

    try:
        extracted = extract_from_images(client, uploads)
    except GuidelineExtractionError as exc:
        logger.error("guidelines_images_failed: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail=PROCESSING_FAILED)
    return _processed(db, user, extracted, "images", len(uploads))


@router.get("/status")
def guidelines_status(
    user_context=Depends(require_admin),
    client: LLMClient = Depends(get_llm_client),
):
    return {
        "claude_enabled": llm_features_enabled() and guideline_extraction_enabled(),
        "api_key_configured": client.is_configured(),
    }
