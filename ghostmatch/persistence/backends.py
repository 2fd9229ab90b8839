"""
GhostMatch — Key-value blob backends.

The persistence gateway only needs four things from a storage medium: read a
blob by key, replace a blob by key in one write, check reachability, and
release resources.  Each backend below provides exactly that for one medium:

- ``MemoryBlobStore``: process-local dict (tests, ephemeral demos)
- ``FileBlobStore``:   one file per key under a directory
- ``RedisBlobStore``:  one Redis string per key
- ``GCSBlobStore``:    one Cloud Storage object per key

Every ``put`` replaces the whole value in a single operation so a reader never
sees half of a bundle.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Protocol

import structlog

from ghostmatch.config import Settings

logger = structlog.get_logger("ghostmatch.persistence.backends")


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, data: bytes) -> None: ...

    def ping(self) -> None: ...

    def close(self) -> None: ...


class MemoryBlobStore:
    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def put(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    def ping(self) -> None:
        return None

    def close(self) -> None:
        return None


class FileBlobStore:
    """Stores each key as ``<root>/<key>.json``.

    Writes go to a temporary sibling first and are then renamed over the
    target, so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def put(self, key: str, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)

    def ping(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        if not os.access(self.root, os.W_OK):
            raise PermissionError(f"{self.root} is not writable")

    def close(self) -> None:
        return None


class RedisBlobStore:
    def __init__(self, url: str, client=None) -> None:
        if client is None:
            import redis

            client = redis.Redis.from_url(
                url,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        self.client = client

    def get(self, key: str) -> Optional[bytes]:
        return self.client.get(key)

    def put(self, key: str, data: bytes) -> None:
        self.client.set(key, data)

    def ping(self) -> None:
        self.client.ping()

    def close(self) -> None:
        self.client.close()


class GCSBlobStore:
    def __init__(self, bucket_name: str, project: str = "", client=None) -> None:
        if client is None:
            from google.cloud import storage as gcs_storage

            client = gcs_storage.Client(project=project or None)
        self.client = client
        self.bucket = client.bucket(bucket_name)

    def get(self, key: str) -> Optional[bytes]:
        blob = self.bucket.blob(key)
        if not blob.exists():
            return None
        return blob.download_as_bytes()

    def put(self, key: str, data: bytes) -> None:
        blob = self.bucket.blob(key)
        blob.upload_from_string(data, content_type="application/octet-stream")

    def ping(self) -> None:
        if not self.bucket.exists():
            raise RuntimeError(f"GCS bucket {self.bucket.name!r} does not exist")

    def close(self) -> None:
        self.client.close()


def build_blob_store(settings: Settings) -> BlobStore:
    """Select the backend named by ``STORAGE_BACKEND``."""
    backend = settings.STORAGE_BACKEND

    if backend == "memory":
        store: BlobStore = MemoryBlobStore()
    elif backend == "redis":
        store = RedisBlobStore(settings.REDIS_URL)
    elif backend == "gcs":
        if not settings.GCS_BUCKET_NAME:
            raise ValueError("GCS_BUCKET_NAME must be set when STORAGE_BACKEND=gcs")
        store = GCSBlobStore(settings.GCS_BUCKET_NAME, project=settings.GCP_PROJECT_ID)
    else:
        store = FileBlobStore(settings.STORAGE_PATH)

    logger.info("blob_store_selected", backend=backend)
    return store
