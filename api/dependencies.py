"""
FastAPI dependencies: per-request session, settings and services
"""

from typing import AsyncIterator
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import Settings
from probing.dispatcher import SourceProber
from storage.uploads import UploadStorage


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request from the app's Database"""
    async with request.app.state.database.session() as session:
        yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_storage(settings: Settings = Depends(get_settings)) -> UploadStorage:
    return UploadStorage(
        upload_dir=settings.UPLOAD_DIR,
        max_bytes=settings.MAX_UPLOAD_BYTES,
        max_files=settings.MAX_UPLOAD_FILES
    )


def get_prober(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> SourceProber:
    return SourceProber(db, settings)
