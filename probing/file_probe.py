"""
File probe for `file` sources.

Content is read from one of three places, chosen by the config's
FileLocation:

- remote: fetched over HTTP(S) as text
- upload: a file in the server's upload directory (`/uploads/<name>`)
- local:  any path on the server's filesystem, resolved absolute

Failures are raised as classified exceptions:
FileNotFoundError -> ResourceNotFoundError (404),
PermissionError   -> PermissionDeniedError (403),
oversized file    -> FileTooLargeError (413),
anything else     -> FileReadError (500).
"""

import asyncio
import httpx
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse
from typing import Dict, Any
from models.base import FileLocation
from schemas.sources import infer_file_location, UPLOAD_PREFIX
from probing.base import FileReadResult
from core.exceptions import (
    ReporterException,
    ResourceNotFoundError,
    PermissionDeniedError,
    FileTooLargeError,
    FileReadError
)
import logging

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf8"
DEFAULT_CONTENT_TYPE = "text/plain"

MIME_TYPES = {
    ".json": "application/json",
    ".csv": "text/csv",
    ".txt": "text/plain",
    ".xml": "application/xml",
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
}


def content_type_for(file_name: str) -> str:
    return MIME_TYPES.get(PurePosixPath(file_name).suffix.lower(), DEFAULT_CONTENT_TYPE)


class FileProbe:
    """
    Read a file source.

    Attributes:
        upload_dir: Directory that `/uploads/` paths resolve against
        max_bytes: Largest local/uploaded file that may be viewed (default: 10 MiB)
        remote_timeout: Timeout in seconds for remote fetches (default: 30)
    """

    def __init__(
        self,
        upload_dir: str,
        max_bytes: int = 10 * 1024 * 1024,
        remote_timeout: float = 30.0
    ):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.remote_timeout = remote_timeout

    @staticmethod
    def resolve_location(config: Dict[str, Any]) -> FileLocation:
        """Stored location, or the path form for rows written without one."""
        location = config.get("location")
        if location:
            return FileLocation(location)
        return infer_file_location(config["path"])

    def resolve_path(self, location: FileLocation, path: str) -> Path:
        if location == FileLocation.UPLOAD:
            relative = path[len(UPLOAD_PREFIX):] if path.startswith(UPLOAD_PREFIX) else path.lstrip("/")
            return (self.upload_dir / relative).resolve()
        return Path(path).resolve()

    async def run(self, config: Dict[str, Any]) -> FileReadResult:
        path = config.get("path") or ""
        encoding = config.get("encoding") or DEFAULT_ENCODING
        context = {"path": path}

        try:
            location = self.resolve_location(config)
            context["location"] = location.value

            if location == FileLocation.REMOTE:
                return await self.read_remote(path, encoding)
            return await self.read_local(self.resolve_path(location, path), encoding)

        except ReporterException:
            raise
        except FileNotFoundError as e:
            raise ResourceNotFoundError("file not found", context=context, original_exception=e)
        except PermissionError as e:
            raise PermissionDeniedError("no permission to read the file", context=context, original_exception=e)
        except Exception as e:
            raise FileReadError(f"error reading file: {e}", context=context, original_exception=e)

    async def read_local(self, file_path: Path, encoding: str) -> FileReadResult:
        stats = await asyncio.to_thread(file_path.stat)
        file_size = stats.st_size

        if file_size > self.max_bytes:
            raise FileTooLargeError(
                f"file too large to view (max {self.max_bytes // (1024 * 1024)}MB)",
                context={
                    "path": str(file_path),
                    "file_size": file_size,
                    "max_bytes": self.max_bytes
                }
            )

        # Undecodable bytes become U+FFFD rather than failing the read
        raw = await asyncio.to_thread(file_path.read_bytes)
        content = raw.decode(encoding, errors="replace")
        logger.info(f"Read {file_size} bytes from {file_path}")

        return FileReadResult(
            file_name=file_path.name,
            file_size=file_size,
            content_type=content_type_for(file_path.name),
            encoding=encoding,
            content=content
        )

    async def read_remote(self, url: str, encoding: str) -> FileReadResult:
        async with httpx.AsyncClient(timeout=self.remote_timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()

        content = response.text
        parsed = urlparse(url)
        file_name = PurePosixPath(parsed.path).name or parsed.netloc
        logger.info(f"Fetched {len(content)} characters from {url}")

        return FileReadResult(
            file_name=file_name,
            file_size=len(content.encode("utf-8")),
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
            encoding=encoding,
            content=content
        )
