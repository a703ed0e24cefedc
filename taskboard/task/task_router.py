import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.calendar_event import CalendarEvent
from taskboard.models.category import Category
from taskboard.models.comment import Comment
from taskboard.models.notification import Notification
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.notification.notification_service import (
    notify_all,
    send_task_assigned_notification,
    send_task_updated_notification,
)
from taskboard.permissions import ensure_users_exist, get_project_for_member, get_task_for_member
from taskboard.schemas.common import UploadUrl
from taskboard.schemas.project_schema import ProjectRead
from taskboard.schemas.task_schema import (
    PersonalTask,
    TaskCreate,
    TaskDetail,
    TaskOrderUpdate,
    TaskRead,
    TaskUpdate,
)
from taskboard.schemas.user_schema import UserPublic
from taskboard.storage.storage_service import create_upload_url, image_refs, resolve_urls
from taskboard.user.user_router import users_by_id

logger = logging.getLogger("taskboard.task")

# fields a PATCH may explicitly set back to null
CLEARABLE_FIELDS = {"description", "category_id", "assignee_id", "due_date"}


# ==========================
#  ROUTER
# ==========================
router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


# ==========================
#  HELPERS
# ==========================
def next_task_order(db: Session, project_id: int) -> int:
    current = db.query(func.max(Task.order)).filter(Task.project_id == project_id).scalar()
    return 0 if current is None else current + 1


def _check_category(db: Session, category_id, project_id: int) -> None:
    if category_id is None:
        return
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    if category.project_id != project_id:
        raise HTTPException(400, "Category belongs to another project")


def _check_parent(db: Session, parent_task_id, project_id: int) -> None:
    if parent_task_id is None:
        return
    parent = db.get(Task, parent_task_id)
    if not parent:
        raise HTTPException(404, "Parent task not found")
    if parent.project_id != project_id:
        raise HTTPException(400, "Parent task belongs to another project")


def _task_details(db: Session, tasks: list[Task]) -> list[TaskDetail]:
    """Attach assignee, assigned users, direct subtasks and image URLs in bulk."""
    if not tasks:
        return []

    user_ids = set()
    storage_ids = set()
    for task in tasks:
        user_ids.update(task.assigned_users or [])
        user_ids.add(task.assignee_id)
        storage_ids.update(task.images or [])
    users = users_by_id(db, user_ids)
    urls = resolve_urls(db, storage_ids)

    subtasks: dict[int, list[Task]] = {}
    rows = (
        db.query(Task)
        .filter(Task.parent_task_id.in_([t.id for t in tasks]))
        .order_by(Task.order, Task.id)
        .all()
    )
    for sub in rows:
        subtasks.setdefault(sub.parent_task_id, []).append(sub)

    details = []
    for task in tasks:
        assignee = users.get(task.assignee_id)
        details.append(
            TaskDetail(
                **TaskRead.model_validate(task).model_dump(),
                assignee=UserPublic.model_validate(assignee) if assignee else None,
                assigned_user_details=[
                    UserPublic.model_validate(users[u]) for u in task.assigned_users if u in users
                ],
                subtasks=[TaskRead.model_validate(s) for s in subtasks.get(task.id, [])],
                image_urls=image_refs(db, task.images, urls),
            )
        )
    return details


def _descendant_ids(db: Session, task_id: int) -> list[int]:
    found = []
    frontier = [task_id]
    while frontier:
        children = [
            row[0]
            for row in db.query(Task.id).filter(Task.parent_task_id.in_(frontier)).all()
            if row[0] not in found
        ]
        found.extend(children)
        frontier = children
    return found


# ==========================
#  QUERIES
# ==========================
@router.get("/project/{project_id}", response_model=list[TaskDetail])
def list_tasks_by_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_project_for_member(db, project_id, user)

    tasks = (
        db.query(Task)
        .filter(Task.project_id == project_id, Task.parent_task_id.is_(None))
        .order_by(Task.order, Task.id)
        .all()
    )
    return _task_details(db, tasks)


@router.get("/personal", response_model=list[PersonalTask])
def get_personal_tasks(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    primary = db.query(Task).filter(Task.assignee_id == user.id).order_by(Task.id).all()

    # assigned_users is a JSON list, so filter in Python after the bulk fetch
    others = (
        db.query(Task)
        .filter(or_(Task.assignee_id.is_(None), Task.assignee_id != user.id))
        .order_by(Task.id)
        .all()
    )
    secondary = [t for t in others if user.id in (t.assigned_users or [])]

    tasks = primary + secondary
    projects = {}
    if tasks:
        rows = db.query(Project).filter(Project.id.in_({t.project_id for t in tasks})).all()
        projects = {p.id: p for p in rows}
    urls = resolve_urls(db, {i for t in tasks for i in (t.images or [])})

    return [
        PersonalTask(
            **TaskRead.model_validate(task).model_dump(),
            project=ProjectRead.model_validate(projects[task.project_id])
            if task.project_id in projects else None,
            image_urls=image_refs(db, task.images, urls),
        )
        for task in tasks
    ]


@router.get("/{task_id}", response_model=TaskDetail)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task, _ = get_task_for_member(db, task_id, user)
    return _task_details(db, [task])[0]


# ==========================
#  MUTATIONS
# ==========================
@router.post("/", response_model=TaskRead, status_code=201)
def create_task(
    data: TaskCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_project_for_member(db, data.project_id, user)
    _check_category(db, data.category_id, data.project_id)
    _check_parent(db, data.parent_task_id, data.project_id)
    ensure_users_exist(db, [data.assignee_id, *data.assigned_users])

    task = Task(
        title=data.title,
        description=data.description,
        project_id=data.project_id,
        category_id=data.category_id,
        assignee_id=data.assignee_id,
        assigned_users=list(data.assigned_users),
        parent_task_id=data.parent_task_id,
        created_by=user.id,
        status="todo",
        priority=data.priority,
        due_date=data.due_date,
        tags=list(data.tags),
        images=list(data.images),
        order=next_task_order(db, data.project_id),
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    recipients = task.recipients(exclude=user.id)
    notify_all(
        background_tasks,
        send_task_assigned_notification,
        recipients,
        task_id=task.id,
        assigned_by=user.id,
    )

    logger.info(
        "task_created",
        extra={"task_id": task.id, "project_id": task.project_id, "notified": len(recipients)},
    )
    return task


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    data: TaskUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task, _ = get_task_for_member(db, task_id, user)

    updates = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    if "category_id" in updates:
        _check_category(db, updates["category_id"], task.project_id)
    if "assignee_id" in updates or "assigned_users" in updates:
        ensure_users_exist(db, [updates.get("assignee_id"), *updates.get("assigned_users", [])])

    previous = task.recipients()

    for field, value in updates.items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)

    newly_assigned = []
    if "assignee_id" in updates or "assigned_users" in updates:
        newly_assigned = [
            u for u in task.recipients(exclude=user.id) if u not in previous
        ]
        notify_all(
            background_tasks,
            send_task_updated_notification,
            newly_assigned,
            task_id=task.id,
            updated_by=user.id,
        )

    logger.info(
        "task_updated",
        extra={"task_id": task.id, "fields": sorted(updates), "notified": len(newly_assigned)},
    )
    return task


@router.patch("/{task_id}/order", response_model=TaskRead)
def update_task_order(
    task_id: int,
    data: TaskOrderUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task, _ = get_task_for_member(db, task_id, user)

    task.order = data.new_order
    if "category_id" in data.model_fields_set:
        _check_category(db, data.category_id, task.project_id)
        task.category_id = data.category_id

    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task, _ = get_task_for_member(db, task_id, user)

    # the whole subtree goes, not just direct children
    doomed = [task.id, *_descendant_ids(db, task.id)]

    comments = db.query(Comment).filter(Comment.task_id.in_(doomed)).delete(synchronize_session=False)
    db.query(CalendarEvent).filter(CalendarEvent.task_id.in_(doomed)).update(
        {CalendarEvent.task_id: None}, synchronize_session=False
    )
    db.query(Notification).filter(Notification.task_id.in_(doomed)).update(
        {Notification.task_id: None}, synchronize_session=False
    )
    db.query(Task).filter(Task.id.in_(doomed)).delete(synchronize_session=False)
    db.commit()

    logger.info(
        "task_deleted",
        extra={"task_id": task_id, "subtasks_deleted": len(doomed) - 1, "comments_deleted": comments},
    )
    return


@router.post("/upload-url", response_model=UploadUrl)
def generate_upload_url(user: User = Depends(get_current_user)):
    return UploadUrl(upload_url=create_upload_url(user))
