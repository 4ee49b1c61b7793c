"""
Pydantic schemas for sources, their tagged config union and probe results
"""

from pydantic import BaseModel, Field, validator
from pydantic import ValidationError as PydanticValidationError
from typing import Optional, Dict, Any
from datetime import datetime
from models.base import SourceType, FileLocation

REMOTE_PREFIXES = ("http://", "https://")
UPLOAD_PREFIX = "/uploads/"


def infer_file_location(path: str) -> FileLocation:
    """Classify a file path by its form."""
    if path.startswith(REMOTE_PREFIXES):
        return FileLocation.REMOTE
    if path.startswith(UPLOAD_PREFIX):
        return FileLocation.UPLOAD
    return FileLocation.LOCAL


# ============================================================================
# Config variants
# ============================================================================

class FileConfig(BaseModel):
    """
    Config for `type = file`.

    `location` is fixed when the source is written. When omitted it is
    inferred from the path; an explicit value must agree with the path
    form (remote only for http(s) URLs, upload only for /uploads/ paths).
    """
    path: str = Field(..., min_length=1)
    encoding: Optional[str] = None
    format: Optional[str] = None
    location: Optional[str] = Field(None, description="remote, upload or local")

    @validator("path")
    def clean_path(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("path cannot be empty")
        return v

    @validator("location", always=True)
    def resolve_location(cls, v, values):
        path = values.get("path")
        if path is None:
            return v

        inferred = infer_file_location(path)
        if v is None:
            return inferred.value

        v = FileLocation(v)
        is_remote = inferred == FileLocation.REMOTE
        if (v == FileLocation.REMOTE) != is_remote:
            raise ValueError(f"location '{v.value}' does not match path '{path}'")
        if v == FileLocation.UPLOAD and inferred != FileLocation.UPLOAD:
            raise ValueError(f"upload paths must start with {UPLOAD_PREFIX}")
        return v.value

    class Config:
        extra = "allow"


class UrlConfig(BaseModel):
    """Config for `type = url`"""
    url: str = Field(..., min_length=1)
    method: str = Field(..., min_length=1)
    headers: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None
    auth: Optional[Dict[str, Any]] = None
    timeout: Optional[int] = Field(None, gt=0, description="Timeout in milliseconds")

    @validator("url")
    def clean_url(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v

    @validator("method")
    def clean_method(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("method cannot be empty")
        return v

    class Config:
        extra = "allow"


CONFIG_MODELS = {
    SourceType.FILE: FileConfig,
    SourceType.URL: UrlConfig,
}


def validate_config(source_type: SourceType, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a raw config against its variant and return the stored form.

    Raises:
        ValueError: config does not fit the variant for `source_type`
    """
    source_type = SourceType(source_type)
    model = CONFIG_MODELS[source_type]
    try:
        validated = model(**config)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValueError(f"invalid config for type '{source_type.value}': {problems}")

    # Keys the client sent are kept as sent, nulls included
    stored = validated.model_dump(exclude_unset=True)
    if isinstance(validated, FileConfig):
        stored["location"] = validated.location
    return stored


# ============================================================================
# Requests
# ============================================================================

class SourceUpdate(BaseModel):
    """Full replacement of a source's mutable fields"""
    name: str = Field(..., min_length=1)
    type: SourceType
    description: Optional[str] = ""
    config: Dict[str, Any]

    @validator("name")
    def clean_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @validator("description", pre=True, always=True)
    def clean_description(cls, v):
        return (v or "").strip()

    @validator("config")
    def check_config_matches_type(cls, v, values):
        source_type = values.get("type")
        if source_type is None:
            return v
        if not v:
            raise ValueError("config is required")
        return validate_config(source_type, v)

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "name": "Orders API",
                "type": "url",
                "description": "Production orders endpoint",
                "config": {
                    "url": "https://example.com/api/orders",
                    "method": "GET",
                    "headers": {"Accept": "application/json"},
                    "timeout": 10000
                }
            }
        }


class SourceCreate(SourceUpdate):
    """Source creation payload"""
    created_by: Optional[str] = "anonymous"

    @validator("created_by", pre=True, always=True)
    def clean_created_by(cls, v):
        return (v or "").strip() or "anonymous"


# ============================================================================
# Responses
# ============================================================================

class SourceResponse(BaseModel):
    """Source as returned by the API"""
    id: int
    name: str
    type: str
    description: Optional[str] = None
    config: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    is_active: bool = True

    last_request_at: Optional[datetime] = None
    last_request_status: Optional[str] = None
    last_request_data: Optional[Any] = None
    last_request_error: Optional[str] = None

    class Config:
        from_attributes = True


class ProbeResult(BaseModel):
    """Outcome of a URL probe"""
    status: str
    data: Optional[Any] = None
    error: Optional[str] = None
    timestamp: datetime


class ProbeResponse(BaseModel):
    success: bool = True
    result: ProbeResult


class FileView(BaseModel):
    """Content of a file source plus its metadata"""
    file_name: str = Field(..., alias="fileName")
    file_size: int = Field(..., alias="fileSize")
    content_type: str = Field(..., alias="contentType")
    encoding: str
    content: str
    last_viewed: datetime = Field(..., alias="lastViewed")

    class Config:
        populate_by_name = True
