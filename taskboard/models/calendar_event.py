# taskboard/models/calendar_event.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from taskboard.database import Base


class CalendarEvent(Base):
    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)

    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    is_all_day = Column(Boolean, default=False, nullable=False)

    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_users = Column(JSON, default=list, nullable=False)

    is_private = Column(Boolean, default=False, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    labels = Column(JSON, default=list, nullable=False)

    image = Column(String, nullable=True)  # storage id
    color = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def is_visible_to(self, user_id: int) -> bool:
        return (
            not self.is_private
            or self.created_by == user_id
            or user_id in (self.assigned_users or [])
        )
