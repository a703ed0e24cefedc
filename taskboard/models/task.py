# taskboard/models/task.py

from __future__ import annotations

from datetime import datetime
from sqlalchemy import JSON, Column, Integer, String, DateTime, ForeignKey
from taskboard.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, default="todo", nullable=False)       # todo / in_progress / completed
    priority = Column(String, default="medium", nullable=False)   # low / medium / high / urgent

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    parent_task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)

    assignee_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    assigned_users = Column(JSON, default=list, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    due_date = Column(DateTime, nullable=True, index=True)
    tags = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)  # storage ids

    order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def recipients(self, exclude: int | None = None) -> list[int]:
        """Assigned users plus the primary assignee, without duplicates or `exclude`."""
        ids = list(self.assigned_users or [])
        if self.assignee_id is not None:
            ids.append(self.assignee_id)
        return unique_ids(ids, exclude=exclude)


def unique_ids(ids, exclude: int | None = None) -> list[int]:
    seen = []
    for user_id in ids:
        if user_id != exclude and user_id not in seen:
            seen.append(user_id)
    return seen
