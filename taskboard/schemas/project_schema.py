# taskboard/schemas/project_schema.py

from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from datetime import datetime

ProjectStatus = Literal["active", "archived"]


# --------- Base schema (common fields) ---------
class ProjectBase(BaseModel):
    name: str
    description: Optional[str] = None
    color: str


# --------- For creating a project (POST) ---------
class ProjectCreate(ProjectBase):
    pass


# --------- For updating a project (PATCH) ---------
class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    status: Optional[ProjectStatus] = None


class AddMemberRequest(BaseModel):
    user_id: int


# --------- For reading a project (GET responses) ---------
class ProjectRead(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    team_members: list[int]
    status: ProjectStatus
    created_at: datetime
