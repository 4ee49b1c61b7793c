"""
Upload storage: save multipart files to the upload directory, list and
delete them.

Stored names never collide: `<stem>-<epoch ms>-<random>.<ext>`. The
returned `relativePath` is `uploads/<name>`, so a client can register a
file source with path `/uploads/<name>` right after uploading.
"""

import asyncio
import random
import time
from datetime import datetime
from pathlib import Path, PurePath
from typing import List, Optional
from fastapi import UploadFile
from schemas.uploads import UploadedFileInfo, StoredFileInfo
from core.exceptions import ValidationError, ResourceNotFoundError, FileTooLargeError
import logging

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_MIMETYPE = "application/octet-stream"
RELATIVE_ROOT = "uploads"


class UploadStorage:
    """
    Files on disk under `upload_dir`.

    Attributes:
        upload_dir: Target directory, created on first save
        max_bytes: Largest accepted upload (default: 10 MiB)
        max_files: Most files accepted by one save_many call (default: 5)
    """

    def __init__(
        self,
        upload_dir: str,
        max_bytes: int = 10 * 1024 * 1024,
        max_files: int = 5
    ):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.max_files = max_files

    @staticmethod
    def unique_name(original_name: str) -> str:
        original = PurePath(original_name or "upload")
        suffix = original.suffix
        stem = original.name[:-len(suffix)] if suffix else original.name
        millis = int(time.time() * 1000)
        return f"{stem}-{millis}-{random.randint(0, 10**9)}{suffix}"

    async def save(self, upload: Optional[UploadFile]) -> UploadedFileInfo:
        if upload is None or not upload.filename:
            raise ValidationError("No file received")

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = self.unique_name(upload.filename)
        target = self.upload_dir / filename

        size = 0
        try:
            out = await asyncio.to_thread(open, target, "wb")
            try:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise FileTooLargeError(
                            f"file too large (max {self.max_bytes // (1024 * 1024)}MB)",
                            context={"filename": upload.filename, "max_bytes": self.max_bytes}
                        )
                    # Disk writes run in a worker thread
                    await asyncio.to_thread(out.write, chunk)
            finally:
                await asyncio.to_thread(out.close)
        except Exception:
            target.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload '{upload.filename}' as {filename} ({size} bytes)")

        return UploadedFileInfo(
            filename=filename,
            original_name=upload.filename,
            mimetype=upload.content_type or DEFAULT_MIMETYPE,
            size=size,
            path=str(target.resolve()),
            relative_path=f"{RELATIVE_ROOT}/{filename}",
            uploaded_at=datetime.utcnow()
        )

    async def save_many(self, uploads: List[UploadFile]) -> List[UploadedFileInfo]:
        """Save every file or none: a failure removes the files already stored"""
        if not uploads:
            raise ValidationError("No files received")
        if len(uploads) > self.max_files:
            raise ValidationError(
                f"Too many files (max {self.max_files})",
                context={"received": len(uploads)}
            )

        saved = []
        try:
            for upload in uploads:
                saved.append(await self.save(upload))
        except Exception:
            for info in saved:
                (self.upload_dir / info.filename).unlink(missing_ok=True)
            if saved:
                logger.warning(f"Removed {len(saved)} file(s) stored before the upload failed")
            raise
        return saved

    def list_files(self) -> List[StoredFileInfo]:
        if not self.upload_dir.is_dir():
            return []

        files = []
        for entry in sorted(self.upload_dir.iterdir()):
            if not entry.is_file():
                continue
            stats = entry.stat()
            files.append(StoredFileInfo(
                filename=entry.name,
                size=stats.st_size,
                relative_path=f"{RELATIVE_ROOT}/{entry.name}",
                created_at=datetime.utcfromtimestamp(stats.st_ctime),
                modified_at=datetime.utcfromtimestamp(stats.st_mtime)
            ))
        return files

    def delete(self, filename: str) -> None:
        if not filename or PurePath(filename).name != filename or filename in (".", ".."):
            raise ValidationError("Invalid file name", context={"filename": filename})

        target = self.upload_dir / filename
        if not target.is_file():
            raise ResourceNotFoundError("File not found", context={"filename": filename})

        target.unlink()
        logger.info(f"Deleted upload {filename}")
