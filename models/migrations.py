"""
Startup schema evolution for the single-file store.

The `sources` table once allowed three discriminator values
('file', 'api', 'endpoint'). The current schema allows two
('file', 'url'). SQLite cannot alter a CHECK constraint in place, so a
legacy table is rebuilt:

    1. create `sources_new` with the current schema
    2. copy rows, mapping 'api' and 'endpoint' to 'url'
       (last-request columns are not carried over)
    3. drop `sources`
    4. rename `sources_new` to `sources`

Run through `AsyncConnection.run_sync(evolve_schema)` before the service
accepts requests. Idempotent: a second run finds the current constraint
and does nothing.
"""

import enum
import logging
import re
from typing import Optional
from sqlalchemy import MetaData, case, column, insert, select, table, text
from sqlalchemy.engine import Connection
from models.source import Source
from models.processor import Processor

logger = logging.getLogger(__name__)

LEGACY_TYPE_CHECK = re.compile(
    r"CHECK\s*\(\s*type\s+IN\s*\(\s*'file'\s*,\s*'api'\s*,\s*'endpoint'\s*\)\s*\)",
    re.IGNORECASE,
)
CURRENT_TYPE_CHECK = re.compile(
    r"CHECK\s*\(\s*type\s+IN\s*\(\s*'file'\s*,\s*'url'\s*\)\s*\)",
    re.IGNORECASE,
)

SHADOW_TABLE = "sources_new"

LEGACY_TYPE_MAP = {"api": "url", "endpoint": "url"}

# Columns copied from a legacy table; last_request_* are dropped
COPIED_COLUMNS = (
    "id",
    "name",
    "type",
    "description",
    "config",
    "created_at",
    "updated_at",
    "created_by",
    "is_active",
)


class MigrationOutcome(str, enum.Enum):
    CREATED = "created"
    MIGRATED = "migrated"
    UP_TO_DATE = "up_to_date"


def read_table_sql(connection: Connection, table_name: str) -> Optional[str]:
    """Return the CREATE statement SQLite recorded for a table, if any."""
    result = connection.execute(
        text("SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :name"),
        {"name": table_name},
    )
    return result.scalar_one_or_none()


def evolve_schema(connection: Connection) -> MigrationOutcome:
    """Bring every table up to date. Returns what happened to `sources`."""
    outcome = evolve_sources_schema(connection)
    Processor.__table__.create(connection, checkfirst=True)
    return outcome


def evolve_sources_schema(connection: Connection) -> MigrationOutcome:
    table_sql = read_table_sql(connection, Source.__tablename__)

    if table_sql is None:
        logger.info("Creating sources table")
        Source.__table__.create(connection)
        return MigrationOutcome.CREATED

    if LEGACY_TYPE_CHECK.search(table_sql):
        logger.info("Migrating sources table: api/endpoint -> url")
        migrate_legacy_sources(connection)
        return MigrationOutcome.MIGRATED

    if not CURRENT_TYPE_CHECK.search(table_sql):
        logger.warning("sources table has an unrecognised type constraint; leaving it unchanged")

    return MigrationOutcome.UP_TO_DATE


def migrate_legacy_sources(connection: Connection) -> int:
    """Copy-transform-swap a legacy sources table. Returns rows copied."""
    shadow = Source.__table__.to_metadata(MetaData(), name=SHADOW_TABLE)

    # A shadow table left behind by an interrupted run holds no data we need
    shadow.drop(connection, checkfirst=True)
    shadow.create(connection)
    logger.info(f"Created {SHADOW_TABLE}")

    legacy = table(Source.__tablename__, *(column(name) for name in COPIED_COLUMNS))
    mapped_type = case(LEGACY_TYPE_MAP, value=legacy.c.type, else_=legacy.c.type)

    rows = select(*[
        mapped_type if name == "type" else legacy.c[name]
        for name in COPIED_COLUMNS
    ])
    result = connection.execute(insert(shadow).from_select(list(COPIED_COLUMNS), rows))
    copied = result.rowcount
    logger.info(f"Copied {copied} rows into {SHADOW_TABLE}")

    connection.exec_driver_sql(f"DROP TABLE {Source.__tablename__}")
    connection.exec_driver_sql(f"ALTER TABLE {SHADOW_TABLE} RENAME TO {Source.__tablename__}")
    logger.info("Migration completed: api/endpoint -> url")

    return copied
