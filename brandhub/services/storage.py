"""Object storage for uploaded brand files.

Google Cloud Storage is used when ``GCS_PROJECT_ID`` and ``GCS_BUCKET_NAME``
are set. Otherwise files land in a local directory that the app serves under
``/uploads`` so development setups still produce working URLs.
"""
from __future__ import annotations

import json
import logging
import mimetypes
import os
import time
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Iterator, Optional

from google.cloud import storage
from google.api_core.exceptions import NotFound
from google.oauth2 import service_account

from brandhub.utils.uploads import sanitize_filename

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"
LOCAL_URL_PREFIX = "/uploads"
_CHUNK_SIZE = 1024 * 1024


@dataclass
class StorageConfig:
    project_id: Optional[str] = None
    bucket_name: Optional[str] = None
    key_file: Optional[str] = None
    credentials_json: Optional[str] = None
    local_dir: str = "uploads"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            project_id=os.getenv("GCS_PROJECT_ID") or None,
            bucket_name=os.getenv("GCS_BUCKET_NAME") or None,
            key_file=os.getenv("GCS_KEY_FILE") or None,
            credentials_json=os.getenv("GCS_CREDENTIALS") or None,
            local_dir=os.getenv("LOCAL_UPLOAD_DIR", "uploads"),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.project_id and self.bucket_name)


@dataclass(frozen=True)
class StoredObject:
    path: str
    public_url: str
    bucket: Optional[str]
    size: int
    content_type: str


@dataclass(frozen=True)
class DownloadHandle:
    filename: str
    content_type: str
    size: Optional[int]
    chunks: Iterator[bytes]


def build_object_path(folder: str, original_name: str) -> str:
    """Return ``{folder}/{epoch_ms}-{sanitised name}``."""
    timestamp = int(time.time() * 1000)
    return f"{folder.strip('/')}/{timestamp}-{sanitize_filename(original_name)}"


class GCSStorage:
    """Bucket-backed storage; uniform bucket-level access controls visibility."""

    is_cloud = True

    def __init__(self, config: StorageConfig):
        self.config = config
        self._client: Optional[storage.Client] = None

    def _get_client(self) -> storage.Client:
        if self._client is None:
            credentials = None
            if self.config.key_file:
                credentials = service_account.Credentials.from_service_account_file(
                    str(Path(self.config.key_file).resolve())
                )
            elif self.config.credentials_json:
                try:
                    info = json.loads(self.config.credentials_json)
                except json.JSONDecodeError as exc:
                    logger.error("Failed to parse GCS_CREDENTIALS: %s", exc)
                else:
                    credentials = service_account.Credentials.from_service_account_info(info)
            self._client = storage.Client(project=self.config.project_id, credentials=credentials)
        return self._client

    def _bucket(self) -> storage.Bucket:
        return self._get_client().bucket(self.config.bucket_name)

    def public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self.config.bucket_name}/{path}"

    def upload(self, data: bytes, original_name: str, content_type: str, folder: str = "assets") -> StoredObject:
        path = build_object_path(folder, original_name)
        blob = self._bucket().blob(path)
        blob.upload_from_string(data, content_type=content_type)
        logger.info("storage_upload: path=%s size=%d", path, len(data))
        return StoredObject(
            path=path,
            public_url=self.public_url(path),
            bucket=self.config.bucket_name,
            size=len(data),
            content_type=content_type,
        )

    def generate_signed_url(self, path: str, expiration_minutes: int = 60) -> str:
        blob = self._bucket().blob(path)
        return blob.generate_signed_url(
            version="v4",
            expiration=timedelta(minutes=expiration_minutes),
            method="GET",
        )

    def delete(self, path: str) -> None:
        self._bucket().blob(path).delete()

    def open_download(self, path: str) -> Optional[DownloadHandle]:
        blob = self._bucket().get_blob(path)
        if blob is None:
            return None

        def _chunks() -> Iterator[bytes]:
            with blob.open("rb", chunk_size=_CHUNK_SIZE) as fh:
                while True:
                    chunk = fh.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk

        return DownloadHandle(
            filename=path.rsplit("/", 1)[-1],
            content_type=blob.content_type or "application/octet-stream",
            size=blob.size,
            chunks=_chunks(),
        )


class LocalStorage:
    """Filesystem storage used when no bucket is configured."""

    is_cloud = False

    def __init__(self, config: StorageConfig):
        self.config = config
        self.root = Path(config.local_dir)

    def public_url(self, path: str) -> str:
        return f"{LOCAL_URL_PREFIX}/{path}"

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise ValueError(f"Path escapes upload directory: {path}")
        return target

    def upload(self, data: bytes, original_name: str, content_type: str, folder: str = "assets") -> StoredObject:
        path = build_object_path(folder, original_name)
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("storage_upload_local: path=%s size=%d", path, len(data))
        return StoredObject(path=path, public_url=self.public_url(path), bucket=None, size=len(data), content_type=content_type)

    def generate_signed_url(self, path: str, expiration_minutes: int = 60) -> str:
        return self.public_url(path)

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        target.unlink()

    def open_download(self, path: str) -> Optional[DownloadHandle]:
        target = self._resolve(path)
        if not target.is_file():
            return None

        def _chunks() -> Iterator[bytes]:
            with target.open("rb") as fh:
                while True:
                    chunk = fh.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk

        content_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
        return DownloadHandle(filename=target.name, content_type=content_type, size=target.stat().st_size, chunks=_chunks())


class StorageService:
    """Facade picking the GCS or local backend from configuration."""

    def __init__(self, config: Optional[StorageConfig] = None):
        self.config = config or StorageConfig.from_env()
        self.backend = GCSStorage(self.config) if self.config.is_configured else LocalStorage(self.config)

    def is_configured(self) -> bool:
        """True when files go to Google Cloud Storage."""
        return self.config.is_configured

    def upload(self, data: bytes, original_name: str, content_type: str, folder: str = "assets") -> StoredObject:
        return self.backend.upload(data, original_name, content_type or "application/octet-stream", folder)

    def generate_signed_url(self, path: str, expiration_minutes: int = 60) -> str:
        return self.backend.generate_signed_url(path, expiration_minutes)

    def delete(self, path: str) -> None:
        self.backend.delete(path)

    def delete_quietly(self, path: Optional[str]) -> bool:
        """Best-effort delete used during cleanup; failures are only logged."""
        if not path:
            return False
        try:
            self.backend.delete(path)
            return True
        except (NotFound, FileNotFoundError):
            logger.warning("storage_delete_missing: path=%s", path)
        except Exception:
            logger.error("storage_delete_failed: path=%s", path, exc_info=True)
        return False

    def open_download(self, path: str) -> Optional[DownloadHandle]:
        return self.backend.open_download(path)


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
