# taskboard/schemas/calendar_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from taskboard.schemas.common import UtcDatetime
from taskboard.schemas.task_schema import TaskRead
from taskboard.schemas.user_schema import UserPublic


class EventCreate(BaseModel):
    title: str
    description: Optional[str] = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    is_all_day: bool
    task_id: Optional[int] = None
    assigned_users: list[int] = []
    is_private: bool
    labels: list[str] = []
    image: Optional[str] = None
    color: str


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    is_all_day: Optional[bool] = None
    assigned_users: Optional[list[int]] = None
    is_private: Optional[bool] = None
    is_completed: Optional[bool] = None
    labels: Optional[list[str]] = None
    image: Optional[str] = None
    color: Optional[str] = None


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_all_day: bool
    task_id: Optional[int] = None
    created_by: int
    assigned_users: list[int]
    is_private: bool
    is_completed: bool
    labels: list[str]
    image: Optional[str] = None
    color: str
    created_at: datetime


class EventDetail(EventRead):
    creator: Optional[UserPublic] = None
    assigned_user_details: list[UserPublic] = []
    task: Optional[TaskRead] = None
    image_url: Optional[str] = None
