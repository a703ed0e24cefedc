# taskboard/storage/storage_router.py

import os

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from taskboard.config import MAX_UPLOAD_BYTES
from taskboard.database import get_db
from taskboard.models.stored_file import StoredFile
from taskboard.schemas.storage_schema import UploadResult
from taskboard.storage.storage_service import file_path, save_upload

router = APIRouter(prefix="/storage", tags=["storage"])


async def read_upload_body(request: Request, limit: int = MAX_UPLOAD_BYTES) -> bytes:
    """Read the raw request body, stopping with 413 as soon as it exceeds the limit."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise HTTPException(status_code=413, detail="File too large")

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise HTTPException(status_code=413, detail="File too large")
        chunks.append(chunk)
    return b"".join(chunks)


# The token in the path is the credential; no bearer header needed.
@router.api_route("/upload/{token}", methods=["POST", "PUT"], response_model=UploadResult, status_code=201)
async def upload_file(token: str, request: Request, db: Session = Depends(get_db)):
    body = await read_upload_body(request)
    stored = await run_in_threadpool(save_upload, db, token, body, request.headers.get("content-type"))
    return UploadResult(storage_id=stored.id, content_type=stored.content_type, size=stored.size)


@router.get("/{storage_id}")
def download_file(storage_id: str, db: Session = Depends(get_db)):
    stored = db.get(StoredFile, storage_id)
    if not stored or not os.path.exists(file_path(stored.id)):
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(file_path(stored.id), media_type=stored.content_type)
