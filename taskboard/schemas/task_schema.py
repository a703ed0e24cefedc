# taskboard/schemas/task_schema.py

from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from datetime import datetime

from taskboard.schemas.common import ImageRef, UtcDatetime
from taskboard.schemas.project_schema import ProjectRead
from taskboard.schemas.user_schema import UserPublic

TaskStatus = Literal["todo", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


# --------- CREATE ----------
class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    project_id: int
    category_id: Optional[int] = None
    assignee_id: Optional[int] = None
    assigned_users: list[int] = []
    parent_task_id: Optional[int] = None
    priority: TaskPriority
    due_date: Optional[UtcDatetime] = None
    tags: list[str] = []
    images: list[str] = []


# --------- UPDATE (PATCH) ----------
# only fields present in the body are applied
class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    assignee_id: Optional[int] = None
    assigned_users: Optional[list[int]] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[UtcDatetime] = None
    tags: Optional[list[str]] = None
    images: Optional[list[str]] = None


class TaskOrderUpdate(BaseModel):
    new_order: int
    category_id: Optional[int] = None


# --------- READ ----------
class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    project_id: int
    category_id: Optional[int] = None
    assignee_id: Optional[int] = None
    assigned_users: list[int]
    created_by: int
    parent_task_id: Optional[int] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    tags: list[str]
    images: list[str]
    order: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class TaskDetail(TaskRead):
    assignee: Optional[UserPublic] = None
    assigned_user_details: list[UserPublic] = []
    subtasks: list[TaskRead] = []
    image_urls: list[ImageRef] = []


class PersonalTask(TaskRead):
    project: Optional[ProjectRead] = None
    image_urls: list[ImageRef] = []
