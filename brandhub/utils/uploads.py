"""Upload validation shared by asset, template, tool and guideline routes.

Files arrive as in-memory payloads (`UploadedFile`). Validation skips OS
metadata files silently and rejects anything outside the allow-list.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024
MAX_FILES = 10
MAX_BULK_LOGO_FILES = 20

ALLOWED_MIMETYPES: Mapping[str, str] = {
    # Images
    "image/png": "PNG",
    "image/jpeg": "JPG",
    "image/jpg": "JPG",
    "image/svg+xml": "SVG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
    # Documents
    "application/pdf": "PDF",
    "application/postscript": "EPS",
    "application/eps": "EPS",
    "application/x-eps": "EPS",
    "image/eps": "EPS",
    "image/x-eps": "EPS",
    "application/illustrator": "EPS",
    # Fonts
    "font/otf": "OTF",
    "font/ttf": "TTF",
    "font/woff": "WOFF",
    "font/woff2": "WOFF2",
    "application/x-font-otf": "OTF",
    "application/x-font-ttf": "TTF",
    "application/font-woff": "WOFF",
    "application/font-woff2": "WOFF2",
    "application/vnd.ms-opentype": "OTF",
    # Videos
    "video/mp4": "MP4",
    "video/webm": "WEBM",
    # Presentations
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "PPTX",
    "application/vnd.apple.keynote": "KEY",
}

ALLOWED_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".svg", ".gif", ".webp",
    ".pdf", ".eps", ".ai",
    ".otf", ".ttf", ".woff", ".woff2",
    ".mp4", ".webm",
    ".pptx", ".key",
})

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})
PDF_EXTENSIONS = frozenset({".pdf"})

_SYSTEM_FILE_NAMES = {"thumbs.db", "desktop.ini"}


class UploadRejectedError(ValueError):
    """Raised when an upload violates the allow-list or size limits."""


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename.lower())[1]


def is_system_file(filename: str) -> bool:
    name = (filename or "").lower()
    return (
        name.startswith(".")
        or name.startswith("__")
        or name in _SYSTEM_FILE_NAMES
        or ".ds_store" in name
    )


def get_file_type(content_type: Optional[str], filename: str) -> str:
    """Map an upload to its file-type label (PNG, SVG, ...).

    The MIME type wins when known; otherwise the upper-cased extension is used.
    """
    mapped = ALLOWED_MIMETYPES.get((content_type or "").lower())
    if mapped:
        return mapped
    ext = os.path.splitext(filename.lower())[1].lstrip(".").upper()
    return "JPG" if ext == "JPEG" else ext


def validate_uploads(
    files: Sequence[UploadedFile],
    *,
    max_files: int = MAX_FILES,
    max_size: int = MAX_FILE_SIZE,
    allowed_extensions: Iterable[str] = ALLOWED_EXTENSIONS,
) -> List[UploadedFile]:
    """Return the files to keep, raising UploadRejectedError on a violation."""
    allowed = set(allowed_extensions)
    kept: List[UploadedFile] = []
    for upload in files:
        if not upload.filename:
            continue
        if is_system_file(upload.filename):
            logger.info("Skipping system file: %s", upload.filename)
            continue
        ext = upload.extension
        if ext not in allowed:
            raise UploadRejectedError(f"File type {ext or '(none)'} is not allowed")
        if upload.size > max_size:
            raise UploadRejectedError(
                f"File too large. Maximum size is {max_size // (1024 * 1024)}MB."
            )
        if upload.content_type and upload.content_type not in ALLOWED_MIMETYPES and upload.content_type not in {
            "application/octet-stream",
            "application/octetstream",
        }:
            logger.warning(
                "Unknown mimetype %s for file %s, extension %s is allowed",
                upload.content_type,
                upload.filename,
                ext,
            )
        kept.append(upload)
    if len(kept) > max_files:
        raise UploadRejectedError(f"Too many files. Maximum is {max_files} files.")
    return kept


def sanitize_filename(filename: str) -> str:
    """Replace characters outside [A-Za-z0-9.-] with underscores."""
    return "".join(ch if (ch.isascii() and ch.isalnum()) or ch in ".-" else "_" for ch in filename)
