"""
Processor endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from schemas.api import DataResponse, ListResponse, MessageResponse
from schemas.processors import ProcessorCreate, ProcessorUpdate, ProcessorResponse, ProcessorInput
from repositories.processors import ProcessorRepository
from core.exceptions import ResourceNotFoundError, NotImplementedFeatureError
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/processors", tags=["Processors"])


def not_found(processor_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError("Processor not found", context={"processor_id": processor_id})


@router.get("", response_model=ListResponse[ProcessorResponse])
async def list_processors(db: AsyncSession = Depends(get_db)):
    processors = await ProcessorRepository(db).list_all()
    return ListResponse[ProcessorResponse](
        data=[ProcessorResponse.model_validate(p) for p in processors],
        total=len(processors)
    )


@router.get("/{processor_id}", response_model=DataResponse[ProcessorResponse])
async def get_processor(processor_id: int, db: AsyncSession = Depends(get_db)):
    processor = await ProcessorRepository(db).get(processor_id)
    if processor is None:
        raise not_found(processor_id)
    return DataResponse[ProcessorResponse](data=ProcessorResponse.model_validate(processor))


@router.post(
    "",
    response_model=DataResponse[ProcessorResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_processor(payload: ProcessorCreate, db: AsyncSession = Depends(get_db)):
    processor = await ProcessorRepository(db).create(payload)
    return DataResponse[ProcessorResponse](
        message="Processor created",
        data=ProcessorResponse.model_validate(processor)
    )


@router.put("/{processor_id}", response_model=DataResponse[ProcessorResponse])
async def update_processor(
    processor_id: int,
    payload: ProcessorUpdate,
    db: AsyncSession = Depends(get_db)
):
    processor = await ProcessorRepository(db).update(processor_id, payload)
    if processor is None:
        raise not_found(processor_id)
    return DataResponse[ProcessorResponse](
        message="Processor updated",
        data=ProcessorResponse.model_validate(processor)
    )


@router.delete("/{processor_id}", response_model=MessageResponse)
async def delete_processor(processor_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await ProcessorRepository(db).delete(processor_id)
    if not deleted:
        raise not_found(processor_id)
    return MessageResponse(message="Processor deleted")


@router.get("/{processor_id}/input", response_model=DataResponse[ProcessorInput])
async def get_processor_input(processor_id: int, db: AsyncSession = Depends(get_db)):
    """Resolve input_source against active sources, then processors"""
    repository = ProcessorRepository(db)
    processor = await repository.get(processor_id)
    if processor is None:
        raise not_found(processor_id)

    resolved = await repository.resolve_input(processor.input_source)
    if resolved is None:
        raise ResourceNotFoundError(
            "Input source not found",
            context={"processor_id": processor_id, "input_source": processor.input_source}
        )

    kind, record = resolved
    return DataResponse[ProcessorInput](
        data=ProcessorInput(kind=kind, id=record.id, name=record.name)
    )


@router.post("/{processor_id}/execute")
async def execute_processor(processor_id: int, db: AsyncSession = Depends(get_db)):
    """Placeholder; processors cannot run yet"""
    processor = await ProcessorRepository(db).get(processor_id)
    if processor is None:
        raise not_found(processor_id)
    raise NotImplementedFeatureError(
        "Processor execution is not implemented",
        context={"processor_id": processor_id}
    )
