"""
Probe dispatcher: load a source, probe it by type, persist the outcome.

The store write always happens after the I/O attempt has finished and
before the outcome is returned (or, for file failures, raised).
"""

from sqlalchemy.ext.asyncio import AsyncSession
from core.config import Settings
from core.exceptions import ReporterException, ResourceNotFoundError, ValidationError
from models.base import SourceType
from models.source import Source
from repositories.sources import SourceRepository
from probing.base import ProbeOutcome, FILE_READ_SUCCESS, FILE_READ_ERROR
from probing.url_probe import UrlProbe
from probing.file_probe import FileProbe
import logging

logger = logging.getLogger(__name__)


class SourceProber:
    """Probe sources and keep their last_request_* columns current"""

    def __init__(self, db_session: AsyncSession, settings: Settings):
        self.repository = SourceRepository(db_session)
        self.url_probe = UrlProbe(default_timeout_ms=settings.PROBE_DEFAULT_TIMEOUT_MS)
        self.file_probe = FileProbe(
            upload_dir=settings.UPLOAD_DIR,
            max_bytes=settings.MAX_FILE_VIEW_BYTES,
            remote_timeout=settings.REMOTE_FILE_TIMEOUT_SECONDS
        )

    async def load(self, source_id: int) -> Source:
        source = await self.repository.get_active(source_id)
        if source is None:
            raise ResourceNotFoundError("Source not found", context={"source_id": source_id})
        return source

    async def probe(self, source_id: int) -> ProbeOutcome:
        """
        Probe any active source.

        File failures are persisted and returned with `failure` set;
        nothing is raised for I/O problems here.
        """
        source = await self.load(source_id)

        if source.type == SourceType.URL.value:
            outcome = await self.url_probe.run(source.config)
        else:
            outcome = await self.read_file(source)

        await self.repository.record_probe(
            source,
            status=outcome.status,
            data=outcome.data,
            error=outcome.error,
            requested_at=outcome.timestamp
        )
        logger.info(f"Probed source {source.id}: {outcome.status}")
        return outcome

    async def read_file(self, source: Source) -> ProbeOutcome:
        try:
            result = await self.file_probe.run(source.config)
        except ReporterException as e:
            logger.warning(f"File read failed for source {source.id}: {e}")
            return ProbeOutcome(
                status=FILE_READ_ERROR,
                data=None,
                error=e.message,
                failure=e
            )

        return ProbeOutcome(
            status=FILE_READ_SUCCESS,
            data=result.summary(),
            error=None,
            file=result
        )

    async def test_url(self, source_id: int) -> ProbeOutcome:
        await self.require_type(source_id, SourceType.URL)
        return await self.probe(source_id)

    async def view_file(self, source_id: int) -> ProbeOutcome:
        """Read a file source; failures are raised after being persisted"""
        await self.require_type(source_id, SourceType.FILE)
        outcome = await self.probe(source_id)

        if outcome.failure is not None:
            raise outcome.failure
        return outcome

    async def require_type(self, source_id: int, expected: SourceType) -> None:
        source = await self.load(source_id)
        if source.type != expected.value:
            raise ValidationError(
                f"Source is not a {expected.value} source",
                context={"source_id": source_id, "type": source.type}
            )
