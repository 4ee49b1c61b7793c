"""
Processor repository
"""

from typing import List, Optional, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from models.processor import Processor
from models.source import Source
from repositories.sources import SourceRepository
from schemas.processors import ProcessorCreate, ProcessorUpdate
import logging

logger = logging.getLogger(__name__)


class ProcessorRepository:
    """Store access for processors. Deletes are physical."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_all(self) -> List[Processor]:
        result = await self.db.execute(
            select(Processor).order_by(Processor.created_at.desc(), Processor.id.desc())
        )
        return list(result.scalars().all())

    async def get(self, processor_id: int) -> Optional[Processor]:
        return await self.db.get(Processor, processor_id)

    async def create(self, data: ProcessorCreate) -> Processor:
        processor = Processor(
            name=data.name,
            description=data.description,
            input_source=data.input_source
        )
        self.db.add(processor)
        await self.db.commit()
        await self.db.refresh(processor)

        logger.info(f"Created processor {processor.id} '{processor.name}'")
        return processor

    async def update(self, processor_id: int, data: ProcessorUpdate) -> Optional[Processor]:
        processor = await self.get(processor_id)
        if processor is None:
            return None

        processor.name = data.name
        processor.description = data.description
        processor.input_source = data.input_source

        await self.db.commit()
        await self.db.refresh(processor)
        return processor

    async def delete(self, processor_id: int) -> bool:
        processor = await self.get(processor_id)
        if processor is None:
            return False

        await self.db.delete(processor)
        await self.db.commit()

        logger.info(f"Deleted processor {processor_id}")
        return True

    async def resolve_input(
        self, input_source: str
    ) -> Optional[Tuple[str, Union[Source, Processor]]]:
        """
        Find what `input_source` points at.

        The id is looked up among active sources first, then among
        processors. Returns ("source", Source), ("processor", Processor)
        or None when neither table has it.
        """
        try:
            record_id = int(str(input_source).strip())
        except ValueError:
            return None

        source = await SourceRepository(self.db).get_active(record_id)
        if source is not None:
            return "source", source

        processor = await self.get(record_id)
        if processor is not None:
            return "processor", processor

        return None
