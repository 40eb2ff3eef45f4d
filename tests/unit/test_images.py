import io

import pytest
from PIL import Image, UnidentifiedImageError

from brandhub.utils.images import Padding, generate_preview, generate_thumbnail, image_metadata, is_processable_image


def _png(width, height, mode="RGBA", color=(128, 42, 2, 255)):
    out = io.BytesIO()
    Image.new(mode, (width, height), color).save(out, format="PNG")
    return out.getvalue()


def _open(data):
    return Image.open(io.BytesIO(data))


def test_processable_mimetypes():
    assert is_processable_image("image/png")
    assert is_processable_image("IMAGE/JPEG")
    assert not is_processable_image("image/svg+xml")
    assert not is_processable_image(None)


def test_preview_fits_inside_box_preserving_ratio():
    preview = _open(generate_preview(_png(1600, 400), width=800, height=600))
    assert preview.size == (800, 200)
    assert preview.format == "PNG"


def test_preview_never_enlarges_small_images():
    preview = _open(generate_preview(_png(100, 50)))
    assert preview.size == (100, 50)


def test_preview_padding_extends_canvas_with_transparency():
    preview = _open(generate_preview(_png(100, 50), padding=Padding(left=10, right=10, top=5, bottom=5)))
    assert preview.size == (120, 60)
    assert preview.convert("RGBA").getpixel((0, 0))[3] == 0
    assert preview.convert("RGBA").getpixel((60, 30))[3] == 255


def test_preview_can_encode_jpeg():
    preview = _open(generate_preview(_png(50, 50), fmt="jpg"))
    assert preview.format == "JPEG"


def test_preview_rejects_non_images():
    with pytest.raises(UnidentifiedImageError):
        generate_preview(b"not an image")


def test_thumbnail_is_square():
    thumb = _open(generate_thumbnail(_png(400, 100), size=64))
    assert thumb.size == (64, 64)


def test_image_metadata():
    meta = image_metadata(_png(30, 20))
    assert meta.width == 30
    assert meta.height == 20
    assert meta.format == "png"
    assert meta.has_alpha is True
    assert meta.pages == 1

    assert image_metadata(_png(5, 5, mode="RGB", color=(0, 0, 0))).has_alpha is False
    assert image_metadata(b"garbage") is None
