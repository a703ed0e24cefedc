# taskboard/permissions.py
"""Lookups shared by the routers: load an entity, then check the caller's
relationship to its project. Not-found is checked before access."""

from fastapi import HTTPException
from sqlalchemy.orm import Session

from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.user import User


def get_project_for_member(db: Session, project_id: int, user: User) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if not project.has_member(user.id):
        raise HTTPException(status_code=403, detail="Access denied")
    return project


def get_task_for_member(db: Session, task_id: int, user: User) -> tuple[Task, Project]:
    task = db.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    project = get_project_for_member(db, task.project_id, user)
    return task, project


def ensure_users_exist(db: Session, user_ids) -> None:
    ids = {i for i in user_ids if i is not None}
    if not ids:
        return
    found = {row[0] for row in db.query(User.id).filter(User.id.in_(ids)).all()}
    if ids - found:
        raise HTTPException(status_code=404, detail="User not found")
