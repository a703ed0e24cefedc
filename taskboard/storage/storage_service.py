from __future__ import annotations

import logging
import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.config import (
    ALGORITHM,
    MAX_UPLOAD_BYTES,
    PUBLIC_BASE_URL,
    SECRET_KEY,
    STORAGE_DIR,
    UPLOAD_URL_EXPIRE_MINUTES,
)
from taskboard.models.stored_file import StoredFile
from taskboard.models.user import User
from taskboard.schemas.common import ImageRef

logger = logging.getLogger("taskboard.storage")


# -------------------------
# Upload URLs
# -------------------------

def create_upload_url(user: User) -> str:
    """Signed URL the client PUTs/POSTs the raw file bytes to, once."""
    exp = datetime.now(timezone.utc) + timedelta(minutes=UPLOAD_URL_EXPIRE_MINUTES)
    token = jwt.encode(
        {"sub": str(user.id), "type": "upload", "jti": uuid.uuid4().hex, "exp": exp},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )
    return f"{PUBLIC_BASE_URL}/storage/upload/{token}"


def decode_upload_token(token: str) -> tuple[int, str]:
    try:
        data = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        if data.get("type") != "upload":
            raise HTTPException(status_code=400, detail="Invalid upload token")
        return int(data["sub"]), str(data["jti"])
    except (JWTError, KeyError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid or expired upload token")


# -------------------------
# Files
# -------------------------

def file_path(storage_id: str) -> str:
    return os.path.join(STORAGE_DIR, storage_id)


def save_upload(db: Session, token: str, body: bytes, content_type: str | None) -> StoredFile:
    user_id, storage_id = decode_upload_token(token)

    if not body:
        raise HTTPException(status_code=400, detail="Empty upload")
    if len(body) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large")
    if db.get(StoredFile, storage_id):
        raise HTTPException(status_code=400, detail="Upload URL already used")

    # the primary key claims the token before anything touches the disk
    stored = StoredFile(
        id=storage_id,
        content_type=content_type or "application/octet-stream",
        size=len(body),
        uploaded_by=user_id,
    )
    db.add(stored)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Upload URL already used")

    os.makedirs(STORAGE_DIR, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=STORAGE_DIR, prefix=".upload-")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(body)
        db.commit()
    except IntegrityError:
        db.rollback()
        os.remove(tmp_path)
        raise HTTPException(status_code=400, detail="Upload URL already used")
    except Exception:
        db.rollback()
        os.remove(tmp_path)
        raise
    os.replace(tmp_path, file_path(storage_id))
    db.refresh(stored)

    logger.info("file_stored", extra={"storage_id": storage_id, "size": stored.size})
    return stored


def get_url(storage_id: str) -> str:
    return f"{PUBLIC_BASE_URL}/storage/{storage_id}"


def resolve_urls(db: Session, storage_ids) -> dict[str, str]:
    """Map storage ids to public URLs; ids with no stored file are omitted."""
    ids = {i for i in storage_ids if i}
    if not ids:
        return {}
    rows = db.query(StoredFile.id).filter(StoredFile.id.in_(ids)).all()
    return {row[0]: get_url(row[0]) for row in rows}


def image_refs(db: Session, storage_ids, urls: dict[str, str] | None = None) -> list[ImageRef]:
    if urls is None:
        urls = resolve_urls(db, storage_ids)
    return [ImageRef(id=i, url=urls[i]) for i in storage_ids if i in urls]
