import enum
import json
from sqlalchemy import Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class SourceType(str, enum.Enum):
    """Source discriminator"""
    FILE = "file"
    URL = "url"


class FileLocation(str, enum.Enum):
    """Where a file source's content lives"""
    REMOTE = "remote"
    UPLOAD = "upload"
    LOCAL = "local"


# ============================================================================
# COLUMN TYPES
# ============================================================================

class JSONText(TypeDecorator):
    """
    JSON payload stored in a plain TEXT column.

    The store never looks inside the value: it is serialized on write and
    parsed back on every read. NULL stays NULL.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)
