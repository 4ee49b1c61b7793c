import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import Database
from core.exceptions import SchemaMigrationError
from core.logging import setup_logging

logger = logging.getLogger(__name__)


async def migrate_database() -> int:
    database = Database(settings.DATABASE_URL)
    logger.info(f"Evolving schema of {database.safe_url}...")

    try:
        await database.init()
    except SchemaMigrationError as e:
        logger.error(f"Schema evolution failed: {e}")
        return 1
    finally:
        await database.dispose()

    logger.info("Schema is up to date.")
    return 0


if __name__ == "__main__":
    setup_logging(settings)
    sys.exit(asyncio.run(migrate_database()))
