# taskboard/schemas/storage_schema.py

from pydantic import BaseModel


class UploadResult(BaseModel):
    storage_id: str
    content_type: str
    size: int
