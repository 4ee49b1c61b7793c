"""
Upload endpoints (multipart)
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile
from api.dependencies import get_upload_storage
from schemas.api import DataResponse, ListResponse, MessageResponse
from schemas.uploads import UploadedFileInfo, StoredFileInfo
from storage.uploads import UploadStorage
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("/single", response_model=DataResponse[UploadedFileInfo])
async def upload_single(
    file: Optional[UploadFile] = File(None),
    storage: UploadStorage = Depends(get_upload_storage)
):
    info = await storage.save(file)
    return DataResponse[UploadedFileInfo](message="File uploaded", data=info)


@router.post("/multiple", response_model=DataResponse[List[UploadedFileInfo]])
async def upload_multiple(
    files: Optional[List[UploadFile]] = File(None),
    storage: UploadStorage = Depends(get_upload_storage)
):
    saved = await storage.save_many(files or [])
    return DataResponse[List[UploadedFileInfo]](
        message=f"{len(saved)} file(s) uploaded",
        data=saved
    )


@router.get("/files", response_model=ListResponse[StoredFileInfo])
async def list_uploaded_files(storage: UploadStorage = Depends(get_upload_storage)):
    files = storage.list_files()
    return ListResponse[StoredFileInfo](data=files, total=len(files))


@router.delete("/files/{filename}", response_model=MessageResponse)
async def delete_uploaded_file(
    filename: str,
    storage: UploadStorage = Depends(get_upload_storage)
):
    storage.delete(filename)
    return MessageResponse(message="File deleted")
