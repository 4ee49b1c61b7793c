"""
Pydantic schemas for processors
"""

from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime


class ProcessorCreate(BaseModel):
    """Processor payload; used for both create and full update"""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    input_source: str = Field(..., min_length=1, description="Id of a source or another processor")

    @validator("name", "description", "input_source", pre=True)
    def clean_text(cls, v):
        # Ids arrive as numbers from some clients
        if isinstance(v, int):
            v = str(v)
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("field cannot be empty")
        return v


ProcessorUpdate = ProcessorCreate


class ProcessorResponse(BaseModel):
    id: int
    name: str
    description: str
    input_source: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProcessorInput(BaseModel):
    """What a processor's input_source resolved to"""
    kind: str = Field(..., description="'source' or 'processor'")
    id: int
    name: str
