"""Pillow helpers for asset previews and thumbnails."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

PROCESSABLE_MIMETYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
})

_TRANSPARENT = (255, 255, 255, 0)


@dataclass(frozen=True)
class Padding:
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.left or self.right or self.top or self.bottom)


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    format: Optional[str]
    has_alpha: bool
    pages: int


def is_processable_image(mimetype: Optional[str]) -> bool:
    return (mimetype or "").lower() in PROCESSABLE_MIMETYPES


def _fit_inside(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Scale down to fit the box, preserving aspect ratio. Never enlarges."""
    tw, th = size
    w, h = img.size
    scale = min(tw / w, th / h, 1.0)
    if scale >= 1.0:
        return img
    return img.resize((max(1, round(w * scale)), max(1, round(h * scale))), Image.Resampling.LANCZOS)


def _resize_cover(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    tw, th = size
    w, h = img.size
    if w == 0 or h == 0:
        return img.resize(size, Image.Resampling.LANCZOS)
    scale = max(tw / w, th / h)
    nw, nh = int(round(w * scale)), int(round(h * scale))
    resized = img.resize((nw, nh), Image.Resampling.LANCZOS)
    left = max(0, (nw - tw) // 2)
    top = max(0, (nh - th) // 2)
    return resized.crop((left, top, left + tw, top + th))


def _encode(img: Image.Image, fmt: str, quality: int) -> bytes:
    out = io.BytesIO()
    fmt = fmt.lower()
    if fmt in {"jpeg", "jpg"}:
        img.convert("RGB").save(out, format="JPEG", quality=quality)
    elif fmt == "webp":
        img.save(out, format="WEBP", quality=quality)
    else:
        img.save(out, format="PNG", optimize=True, compress_level=9)
    return out.getvalue()


def generate_preview(
    data: bytes,
    *,
    width: int = 800,
    height: int = 600,
    padding: Padding = Padding(),
    fmt: str = "png",
    quality: int = 80,
) -> bytes:
    """Return an encoded preview that fits inside width x height.

    Padding is added around the resized image on a transparent canvas.
    """
    with Image.open(io.BytesIO(data)) as src:
        src.seek(0)
        img = src.convert("RGBA")
    img = _fit_inside(img, (width, height))
    if not padding.is_empty:
        w, h = img.size
        canvas = Image.new(
            "RGBA",
            (w + padding.left + padding.right, h + padding.top + padding.bottom),
            _TRANSPARENT,
        )
        canvas.paste(img, (padding.left, padding.top), img)
        img = canvas
    return _encode(img, fmt, quality)


def generate_thumbnail(data: bytes, size: int = 200) -> bytes:
    """Return a square PNG thumbnail, cover-cropped around the centre."""
    with Image.open(io.BytesIO(data)) as src:
        img = src.convert("RGBA")
    return _encode(_resize_cover(img, (size, size)), "png", 80)


def image_metadata(data: bytes) -> Optional[ImageMetadata]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return ImageMetadata(
                width=img.width,
                height=img.height,
                format=(img.format or "").lower() or None,
                has_alpha=img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info),
                pages=getattr(img, "n_frames", 1),
            )
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Could not read image metadata: %s", exc)
        return None
