# taskboard/schemas/comment_schema.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from taskboard.schemas.user_schema import UserPublic


class CommentCreate(BaseModel):
    task_id: int
    content: str
    parent_comment_id: Optional[int] = None


class CommentUpdate(BaseModel):
    content: str


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    author_id: int
    content: str
    parent_comment_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReplyRead(CommentRead):
    author: Optional[UserPublic] = None


class CommentThread(CommentRead):
    author: Optional[UserPublic] = None
    replies: list[ReplyRead] = []
