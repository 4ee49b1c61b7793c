"""
Source repository: CRUD over active sources plus probe bookkeeping
"""

from typing import List, Optional, Any
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from models.source import Source
from schemas.sources import SourceCreate, SourceUpdate
import logging

logger = logging.getLogger(__name__)


class SourceRepository:
    """
    Store access for sources.

    Every read and mutation is restricted to `is_active` rows; a
    soft-deleted source behaves as if it did not exist. `config` arrives
    already validated against its type.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_active(self) -> List[Source]:
        """All active sources, most recently updated first"""
        result = await self.db.execute(
            select(Source)
            .where(Source.is_active.is_(True))
            .order_by(Source.updated_at.desc(), Source.id.desc())
        )
        return list(result.scalars().all())

    async def get_active(self, source_id: int) -> Optional[Source]:
        result = await self.db.execute(
            select(Source).where(
                and_(
                    Source.id == source_id,
                    Source.is_active.is_(True)
                )
            )
        )
        return result.scalar_one_or_none()

    async def create(self, data: SourceCreate) -> Source:
        now = datetime.utcnow()
        source = Source(
            name=data.name,
            type=data.type,
            description=data.description,
            config=data.config,
            created_by=data.created_by,
            is_active=True,
            created_at=now,
            updated_at=now
        )
        self.db.add(source)
        await self.db.commit()
        await self.db.refresh(source)

        logger.info(f"Created source {source.id} ({source.type}) '{source.name}'")
        return source

    async def update(self, source_id: int, data: SourceUpdate) -> Optional[Source]:
        """Replace name, type, description and config. None when not active."""
        source = await self.get_active(source_id)
        if source is None:
            return None

        source.name = data.name
        source.type = data.type
        source.description = data.description
        source.config = data.config
        source.updated_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(source)

        logger.info(f"Updated source {source.id}")
        return source

    async def soft_delete(self, source_id: int) -> bool:
        source = await self.get_active(source_id)
        if source is None:
            return False

        source.is_active = False
        source.updated_at = datetime.utcnow()
        await self.db.commit()

        logger.info(f"Soft-deleted source {source_id}")
        return True

    async def record_probe(
        self,
        source: Source,
        status: str,
        data: Optional[Any],
        error: Optional[str],
        requested_at: Optional[datetime] = None
    ) -> Source:
        """
        Store the outcome of the latest probe on the source row.

        `updated_at` is left alone: a probe is not an edit.
        """
        source.last_request_at = requested_at or datetime.utcnow()
        source.last_request_status = status
        source.last_request_data = data
        source.last_request_error = error

        await self.db.commit()
        await self.db.refresh(source)
        return source
