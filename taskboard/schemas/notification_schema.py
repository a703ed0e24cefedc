# taskboard/schemas/notification_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

NotificationType = Literal["task_assigned", "task_updated", "comment_added", "due_date_reminder"]


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    task_id: int | None = None
    type: NotificationType
    title: str
    message: str
    is_read: bool
    created_at: datetime


class UnreadCount(BaseModel):
    unread: int
