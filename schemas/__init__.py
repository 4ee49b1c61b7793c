"""
Pydantic schemas for request validation and response serialization.

Schemas:
    api: Response envelopes, health check and error payloads
    sources: Source requests/responses, the FileConfig/UrlConfig tagged
             union and probe results
    processors: Processor requests/responses
    uploads: Uploaded and stored file metadata

Validation:
    A source's `config` is checked against the variant selected by its
    `type` before anything reaches a repository:
    - file: non-empty `path`
    - url: non-empty `url` and `method`

Usage:
    from schemas.sources import SourceCreate, SourceResponse
    from schemas.api import DataResponse, ListResponse

Example:
    source = SourceCreate(
        name="Orders",
        type="url",
        config={"url": "https://example.com", "method": "get"}
    )
    assert source.config["method"] == "GET"
"""

__all__ = [
    "DataResponse",
    "ListResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "FileConfig",
    "UrlConfig",
    "SourceCreate",
    "SourceUpdate",
    "SourceResponse",
    "ProbeResult",
    "FileView",
    "ProcessorCreate",
    "ProcessorResponse",
    "UploadedFileInfo",
    "StoredFileInfo",
]
