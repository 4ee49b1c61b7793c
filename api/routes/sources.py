"""
Source endpoints: CRUD over active sources, URL test and file view
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db, get_prober
from schemas.api import DataResponse, ListResponse, MessageResponse
from schemas.sources import (
    SourceCreate, SourceUpdate, SourceResponse,
    ProbeResponse, ProbeResult, FileView
)
from repositories.sources import SourceRepository
from probing.dispatcher import SourceProber
from core.exceptions import ResourceNotFoundError
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sources", tags=["Sources"])


def not_found(source_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError("Source not found", context={"source_id": source_id})


@router.get("", response_model=ListResponse[SourceResponse])
async def list_sources(db: AsyncSession = Depends(get_db)):
    """Active sources, most recently updated first"""
    sources = await SourceRepository(db).list_active()
    return ListResponse[SourceResponse](
        data=[SourceResponse.model_validate(source) for source in sources],
        total=len(sources)
    )


@router.get("/{source_id}", response_model=DataResponse[SourceResponse])
async def get_source(source_id: int, db: AsyncSession = Depends(get_db)):
    source = await SourceRepository(db).get_active(source_id)
    if source is None:
        raise not_found(source_id)
    return DataResponse[SourceResponse](data=SourceResponse.model_validate(source))


@router.post(
    "",
    response_model=DataResponse[SourceResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_source(
    payload: SourceCreate,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a source.

    `config` must match `type`: a file source needs `path`, a url source
    needs `url` and `method`. Mismatches are rejected with 400 and
    nothing is stored.
    """
    source = await SourceRepository(db).create(payload)
    logger.info(f"[{getattr(request.state, 'request_id', '-')}] Source {source.id} created")
    return DataResponse[SourceResponse](
        message="Source created",
        data=SourceResponse.model_validate(source)
    )


@router.put("/{source_id}", response_model=DataResponse[SourceResponse])
async def update_source(
    source_id: int,
    payload: SourceUpdate,
    db: AsyncSession = Depends(get_db)
):
    source = await SourceRepository(db).update(source_id, payload)
    if source is None:
        raise not_found(source_id)
    return DataResponse[SourceResponse](
        message="Source updated",
        data=SourceResponse.model_validate(source)
    )


@router.delete("/{source_id}", response_model=MessageResponse)
async def delete_source(source_id: int, db: AsyncSession = Depends(get_db)):
    """Soft delete: the row stays, but the source disappears from the API"""
    deleted = await SourceRepository(db).soft_delete(source_id)
    if not deleted:
        raise not_found(source_id)
    return MessageResponse(message="Source deleted")


@router.post("/{source_id}/test", response_model=ProbeResponse)
async def test_source(source_id: int, prober: SourceProber = Depends(get_prober)):
    """
    Send the configured request once and record the outcome.

    Unreachable hosts and non-2xx answers are reported in `result`, not
    as an HTTP error.
    """
    outcome = await prober.test_url(source_id)
    return ProbeResponse(
        result=ProbeResult(
            status=outcome.status,
            data=outcome.data,
            error=outcome.error,
            timestamp=outcome.timestamp
        )
    )


@router.get("/{source_id}/view", response_model=DataResponse[FileView])
async def view_source(source_id: int, prober: SourceProber = Depends(get_prober)):
    outcome = await prober.view_file(source_id)
    result = outcome.file
    return DataResponse[FileView](
        data=FileView(
            file_name=result.file_name,
            file_size=result.file_size,
            content_type=result.content_type,
            encoding=result.encoding,
            content=result.content,
            last_viewed=outcome.timestamp
        )
    )
