# taskboard/project/project_router.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.project import Project
from taskboard.models.user import User
from taskboard.permissions import ensure_users_exist, get_project_for_member
from taskboard.schemas.project_schema import (
    AddMemberRequest,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)

logger = logging.getLogger("taskboard.project")

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_owned_project(db: Session, project_id: int, user: User, action: str) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.owner_id != user.id:
        raise HTTPException(status_code=403, detail=f"Only project owner can {action}")
    return project


# ==========================
#  LIST PROJECTS
# ==========================
@router.get("/", response_model=list[ProjectRead])
def list_projects(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    projects = db.query(Project).order_by(Project.id).all()
    return [p for p in projects if p.has_member(user.id)]


# ==========================
#  GET PROJECT BY ID
# ==========================
@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_project_for_member(db, project_id, user)


# ==========================
#  CREATE PROJECT
# ==========================
@router.post("/", response_model=ProjectRead, status_code=201)
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = Project(
        name=data.name,
        description=data.description,
        color=data.color,
        owner_id=user.id,
        team_members=[user.id],
        status="active",
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info("project_created", extra={"project_id": project.id, "user_id": user.id})
    return project


# ==========================
#  UPDATE PROJECT (PATCH)
# ==========================
@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = _get_owned_project(db, project_id, user, "update project")

    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        # only the description may be cleared
        if value is None and field != "description":
            continue
        setattr(project, field, value)

    db.commit()
    db.refresh(project)
    return project


# ==========================
#  ADD TEAM MEMBER
# ==========================
@router.post("/{project_id}/members", response_model=ProjectRead)
def add_team_member(
    project_id: int,
    data: AddMemberRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = _get_owned_project(db, project_id, user, "add team members")
    ensure_users_exist(db, [data.user_id])

    if data.user_id not in project.team_members:
        # reassign: JSON columns do not track in-place mutation
        project.team_members = [*project.team_members, data.user_id]
        db.commit()
        db.refresh(project)
        logger.info("team_member_added", extra={"project_id": project.id, "member_id": data.user_id})

    return project
