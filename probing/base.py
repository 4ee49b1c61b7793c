"""
Shared probe types
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from core.exceptions import ReporterException

FILE_READ_SUCCESS = "File Read Success"
FILE_READ_ERROR = "File Read Error"
NETWORK_ERROR = "Network Error"
GENERIC_ERROR = "Error"


@dataclass
class FileReadResult:
    """Content and metadata of a file source"""
    file_name: str
    file_size: int
    content_type: str
    encoding: str
    content: str

    def summary(self) -> Dict[str, Any]:
        """What gets persisted in last_request_data (content excluded)"""
        return {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "contentType": self.content_type,
            "encoding": self.encoding,
            "contentLength": len(self.content),
        }


@dataclass
class ProbeOutcome:
    """
    Result of probing a source, exactly as persisted on the source row.

    `file` is set for successful file reads; `failure` holds the
    classified exception for failed file reads.
    """
    status: str
    data: Optional[Any] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)
    file: Optional[FileReadResult] = None
    failure: Optional[ReporterException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
