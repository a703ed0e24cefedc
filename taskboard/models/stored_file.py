# taskboard/models/stored_file.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from taskboard.database import Base


class StoredFile(Base):
    __tablename__ = "stored_files"

    # opaque storage id, also the jti of the upload token that created it
    id = Column(String(64), primary_key=True)

    content_type = Column(String, nullable=False, default="application/octet-stream")
    size = Column(Integer, nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
