import re

import pytest

from brandhub.services.storage import LocalStorage, StorageConfig, StorageService, build_object_path


@pytest.fixture
def local(tmp_path):
    return StorageService(StorageConfig(local_dir=str(tmp_path)))


def test_build_object_path_prefixes_timestamp_and_sanitises():
    path = build_object_path("/assets/", "My Logo.png")
    assert re.match(r"^assets/\d+-My_Logo\.png$", path)


def test_unconfigured_service_uses_local_backend(local):
    assert isinstance(local.backend, LocalStorage)
    assert local.is_configured() is False


def test_upload_writes_file_and_returns_public_url(local, tmp_path):
    stored = local.upload(b"hello", "logo.svg", "image/svg+xml", "assets")
    assert stored.public_url == f"/uploads/{stored.path}"
    assert stored.size == 5
    assert stored.bucket is None
    assert (tmp_path / stored.path).read_bytes() == b"hello"


def test_upload_defaults_missing_content_type(local):
    stored = local.upload(b"x", "font.woff2", "", "fonts")
    assert stored.content_type == "application/octet-stream"


def test_open_download_streams_content(local):
    stored = local.upload(b"abc" * 10, "doc.pdf", "application/pdf", "templates")
    handle = local.open_download(stored.path)
    assert handle.content_type == "application/pdf"
    assert handle.size == 30
    assert b"".join(handle.chunks) == b"abc" * 10


def test_open_download_missing_returns_none(local):
    assert local.open_download("templates/missing.pdf") is None


def test_delete_quietly(local, tmp_path):
    stored = local.upload(b"x", "a.png", "image/png", "assets")
    assert local.delete_quietly(stored.path) is True
    assert not (tmp_path / stored.path).exists()
    assert local.delete_quietly(stored.path) is False
    assert local.delete_quietly(None) is False


def test_paths_cannot_escape_upload_dir(local):
    with pytest.raises(ValueError):
        local.open_download("../outside.txt")


def test_signed_url_falls_back_to_public_url(local):
    assert local.generate_signed_url("templates/a.pdf") == "/uploads/templates/a.pdf"
