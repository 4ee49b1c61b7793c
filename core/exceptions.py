"""
Custom exceptions for the source registry with structured error context.

Every exception carries an HTTP status code so the API layer can turn
it into the uniform error envelope without a lookup table.

Exception Hierarchy:
    ReporterException (base, 500)
    ├── ValidationError (400)
    ├── ResourceNotFoundError (404)
    ├── PermissionDeniedError (403)
    ├── FileTooLargeError (413)
    ├── NotImplementedFeatureError (501)
    ├── FileReadError (500)
    └── DatabaseError (500)
        └── SchemaMigrationError (500)
"""

from typing import Optional, Dict, Any
from datetime import datetime


class ReporterException(Exception):
    """
    Base exception for all source registry errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source id, path, etc.)
        original_exception: The original exception that was caught (if any)
        status_code: HTTP status the API layer responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg


# ============================================================================
# Client Errors
# ============================================================================

class ValidationError(ReporterException):
    """
    Raised when a request is missing fields or carries malformed values.

    Context should include:
        - field_name: Name of the offending field (if known)
        - field_value: Value that failed validation
    """
    status_code = 400


class ResourceNotFoundError(ReporterException):
    """Raised when an id has no matching active record, or a file is missing."""
    status_code = 404


class PermissionDeniedError(ReporterException):
    """Raised when the process may not read a file a source points at."""
    status_code = 403


class FileTooLargeError(ReporterException):
    """
    Raised when a file exceeds the viewing or upload size limit.

    Context should include:
        - file_size: Size of the offending file in bytes
        - max_bytes: The limit that was exceeded
    """
    status_code = 413


class NotImplementedFeatureError(ReporterException):
    """Raised by endpoints that exist only as placeholders."""
    status_code = 501


# ============================================================================
# File Read Errors
# ============================================================================

class FileReadError(ReporterException):
    """
    Raised when reading a file source fails for an unclassified reason.

    Context should include:
        - source_id: Id of the probed source
        - path: The configured path
    """
    pass


# ============================================================================
# Store Errors
# ============================================================================

class DatabaseError(ReporterException):
    """
    Exception raised when store operations fail.

    Context should include:
        - operation: Type of database operation
        - table_name: Name of the table
    """
    pass


class SchemaMigrationError(DatabaseError):
    """Raised when the startup schema evolution cannot complete."""
    pass
