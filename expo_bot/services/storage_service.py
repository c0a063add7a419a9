"""
Bucket-style file storage for uploaded company logos.

`LocalFileStorage` keeps every bucket as a sub-directory of STORAGE_DIR.
Blocking filesystem calls run in a worker thread so the event loop stays
responsive while a logo is written.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a file cannot be stored; str(exc) is shown to the user."""


@dataclass(frozen=True)
class StoredFile:
    bucket: str
    path: str      # key inside the bucket, persisted as company_logo_url


class FileStorage(Protocol):
    async def upload(self, bucket: str, key: str, content: bytes) -> StoredFile: ...


class LocalFileStorage:
    """Directory-backed storage. Existing keys are never overwritten."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    def _target(self, bucket: str, key: str) -> Path:
        bucket_dir = (self.base_dir / bucket).resolve()
        target = (bucket_dir / key).resolve()
        if bucket_dir not in target.parents:
            raise StorageError(f"Invalid object key: {key}")
        return target

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        # "xb" fails instead of clobbering an existing object
        with open(target, "xb") as fh:
            fh.write(content)

    async def upload(self, bucket: str, key: str, content: bytes) -> StoredFile:
        target = self._target(bucket, key)
        try:
            await asyncio.to_thread(self._write, target, content)
        except FileExistsError as exc:
            raise StorageError("The resource already exists") from exc
        except OSError as exc:
            raise StorageError(exc.strerror or str(exc)) from exc
        logger.info("Stored %d bytes at %s/%s", len(content), bucket, key)
        return StoredFile(bucket=bucket, path=key)
