"""
Pydantic schemas for API response envelopes
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Generic, TypeVar
from datetime import datetime

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Single-record envelope"""
    success: bool = True
    message: Optional[str] = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Collection envelope"""
    success: bool = True
    data: List[T]
    total: int


class MessageResponse(BaseModel):
    """Envelope for operations that return no record"""
    success: bool = True
    message: str


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Static liveness payload"""
    status: str = "OK"
    message: str = "Reporter API is running"
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "OK",
                "message": "Reporter API is running",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Uniform error envelope"""
    success: bool = False
    error: str
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Source not found",
                "message": "Source not found"
            }
        }
