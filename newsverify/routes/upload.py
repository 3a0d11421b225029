"""
API route for file uploads.

Open to anonymous callers so an avatar can be uploaded before the
account exists.
"""

from typing import Optional

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from newsverify.errors import ValidationFailed
from newsverify.models import UploadResponse
from newsverify.storage import store_upload


router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post("", response_model=UploadResponse)
async def upload_file(file: Optional[UploadFile] = File(default=None)) -> UploadResponse:
    """Store a file and return its public URL."""
    if file is None or not file.filename:
        raise ValidationFailed("No file uploaded")
    url = await run_in_threadpool(store_upload, file.file, file.filename)
    return UploadResponse(url=url)
