# taskboard/schemas/common.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel


def to_naive_utc(value: datetime) -> datetime:
    # the database stores naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class ImageRef(BaseModel):
    id: str
    url: str


class UploadUrl(BaseModel):
    upload_url: str
