"""
Pydantic schemas for uploaded files
"""

from pydantic import BaseModel, Field
from datetime import datetime


class UploadedFileInfo(BaseModel):
    """A file that was just stored"""
    filename: str
    original_name: str = Field(..., alias="originalName")
    mimetype: str
    size: int
    path: str
    relative_path: str = Field(..., alias="relativePath")
    uploaded_at: datetime = Field(..., alias="uploadedAt")

    class Config:
        populate_by_name = True


class StoredFileInfo(BaseModel):
    """A file found in the upload directory"""
    filename: str
    size: int
    relative_path: str = Field(..., alias="relativePath")
    created_at: datetime = Field(..., alias="createdAt")
    modified_at: datetime = Field(..., alias="modifiedAt")

    class Config:
        populate_by_name = True
