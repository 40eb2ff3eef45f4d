"""
Multipart helpers shared by the upload endpoints.

Reads FastAPI ``UploadFile`` parts into memory, applies the upload allow-list
and translates rejections into 400 responses.
"""
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi import HTTPException, UploadFile
from PIL import UnidentifiedImageError

from brandhub.services.storage import StorageService, StoredObject
from brandhub.utils.images import Padding, generate_preview, is_processable_image
from brandhub.utils.uploads import (
    ALLOWED_EXTENSIONS,
    MAX_FILE_SIZE,
    MAX_FILES,
    UploadedFile,
    UploadRejectedError,
    get_file_type,
    validate_uploads,
)

logger = logging.getLogger(__name__)

PREVIEW_FOLDER = "previews"


def read_uploads(
    parts: Optional[Iterable[UploadFile]],
    *,
    max_files: int = MAX_FILES,
    max_size: int = MAX_FILE_SIZE,
    allowed_extensions: Iterable[str] = ALLOWED_EXTENSIONS,
) -> List[UploadedFile]:
    files = []
    for part in parts or []:
        if part is None or not part.filename:
            continue
        files.append(
            UploadedFile(
                filename=part.filename,
                content_type=part.content_type or "application/octet-stream",
                data=part.file.read(),
            )
        )
    try:
        return validate_uploads(
            files,
            max_files=max_files,
            max_size=max_size,
            allowed_extensions=allowed_extensions,
        )
    except UploadRejectedError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def read_single_upload(part: Optional[UploadFile], **kwargs) -> Optional[UploadedFile]:
    files = read_uploads([part] if part is not None else [], **kwargs)
    return files[0] if files else None


def store_files(storage: StorageService, files: Iterable[UploadedFile], folder: str) -> List[Dict[str, Any]]:
    """Upload each file and return asset file records."""
    records = []
    for upload in files:
        stored = storage.upload(upload.data, upload.filename, upload.content_type, folder)
        records.append(
            {
                "file_type": get_file_type(upload.content_type, upload.filename),
                "file_url": stored.public_url,
                "storage_path": stored.path,
                "file_size": upload.size,
            }
        )
    return records


def parse_tags(raw: Union[str, List[str], None]) -> Optional[List[str]]:
    """Accept a list of tags or a single comma separated string."""
    if raw is None:
        return None
    values = raw if isinstance(raw, list) else [raw]
    tags = []
    for value in values:
        for piece in str(value).split(","):
            cleaned = piece.strip()
            if cleaned and cleaned not in tags:
                tags.append(cleaned)
    return tags


def parse_bool(raw: Optional[str], default: Optional[bool] = None) -> Optional[bool]:
    """Multipart booleans arrive as strings; only 'false'/'0'/'off' are false."""
    if raw is None or raw == "":
        return default
    return raw.strip().lower() not in {"false", "0", "off", "no"}


def first_processable_image(files: Iterable[UploadedFile], prefer: Optional[str] = None) -> Optional[UploadedFile]:
    """First upload Pillow can render, optionally preferring one extension (e.g. '.png')."""
    candidates = [f for f in files if is_processable_image(f.content_type)]
    if prefer:
        for upload in candidates:
            if upload.extension == prefer:
                return upload
    return candidates[0] if candidates else None


def store_preview(storage: StorageService, upload: UploadedFile) -> StoredObject:
    return storage.upload(upload.data, upload.filename, upload.content_type, PREVIEW_FOLDER)


def generate_and_store_preview(
    storage: StorageService,
    source: UploadedFile,
    *,
    width: int = 800,
    height: int = 600,
    padding: Padding = Padding(),
) -> Optional[StoredObject]:
    """Render a PNG preview from an uploaded image and store it.

    Returns None when the image cannot be decoded; the asset is still saved.
    """
    try:
        data = generate_preview(source.data, width=width, height=height, padding=padding)
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("preview_generation_failed: file=%s error=%s", source.filename, exc)
        return None
    name = f"preview-{int(time.time() * 1000)}.png"
    return storage.upload(data, name, "image/png", PREVIEW_FOLDER)
