# taskboard/models/project.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from taskboard.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    color = Column(String, nullable=False)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # user ids; the owner is added on creation
    team_members = Column(JSON, default=list, nullable=False)

    status = Column(String, default="active", nullable=False)  # active | archived

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def has_member(self, user_id: int) -> bool:
        return self.owner_id == user_id or user_id in (self.team_members or [])
