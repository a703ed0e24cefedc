# taskboard/calendar/calendar_router.py

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.calendar_event import CalendarEvent
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.permissions import ensure_users_exist, get_task_for_member
from taskboard.schemas.calendar_schema import EventCreate, EventDetail, EventRead, EventUpdate
from taskboard.schemas.common import UploadUrl, to_naive_utc
from taskboard.schemas.task_schema import TaskRead
from taskboard.schemas.user_schema import UserPublic
from taskboard.storage.storage_service import create_upload_url, resolve_urls
from taskboard.user.user_router import users_by_id

logger = logging.getLogger("taskboard.calendar")

router = APIRouter(prefix="/calendar", tags=["calendar"])

CLEARABLE_FIELDS = {"description", "image"}


def _passes_filters(
    event: CalendarEvent,
    user_id: int,
    show_completed: Optional[bool],
    labels: Optional[list[str]],
) -> bool:
    if not event.is_visible_to(user_id):
        return False
    # completed events are hidden only on an explicit show_completed=false
    if show_completed is False and event.is_completed:
        return False
    if labels and not any(label in labels for label in (event.labels or [])):
        return False
    return True


def _event_details(db: Session, events: list[CalendarEvent], user_id: int) -> list[EventDetail]:
    user_ids = set()
    for event in events:
        user_ids.add(event.created_by)
        user_ids.update(event.assigned_users or [])
    users = users_by_id(db, user_ids)

    task_ids = {e.task_id for e in events if e.task_id is not None}
    tasks = {t.id: t for t in db.query(Task).filter(Task.id.in_(task_ids)).all()} if task_ids else {}
    # linked tasks are shown only to members of the task's project
    if tasks:
        project_ids = {t.project_id for t in tasks.values()}
        projects = {p.id: p for p in db.query(Project).filter(Project.id.in_(project_ids)).all()}
        tasks = {
            tid: t for tid, t in tasks.items()
            if t.project_id in projects and projects[t.project_id].has_member(user_id)
        }

    # own image first, otherwise the linked task's first image
    wanted = {}
    for event in events:
        task = tasks.get(event.task_id)
        if event.image:
            wanted[event.id] = event.image
        elif task is not None and task.images:
            wanted[event.id] = task.images[0]
    urls = resolve_urls(db, wanted.values())

    details = []
    for event in events:
        creator = users.get(event.created_by)
        task = tasks.get(event.task_id)
        details.append(
            EventDetail(
                **EventRead.model_validate(event).model_dump(),
                creator=UserPublic.model_validate(creator) if creator else None,
                assigned_user_details=[
                    UserPublic.model_validate(users[u]) for u in event.assigned_users if u in users
                ],
                task=TaskRead.model_validate(task) if task else None,
                image_url=urls.get(wanted.get(event.id)),
            )
        )
    return details


@router.get("/events", response_model=list[EventDetail])
def list_events(
    start_date: datetime,
    end_date: datetime,
    show_completed: Optional[bool] = None,
    labels: Optional[list[str]] = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = (
        db.query(CalendarEvent)
        .filter(
            CalendarEvent.start_date >= to_naive_utc(start_date),
            CalendarEvent.start_date <= to_naive_utc(end_date),
        )
        .order_by(CalendarEvent.start_date, CalendarEvent.id)
        .all()
    )
    visible = [e for e in events if _passes_filters(e, user.id, show_completed, labels)]
    return _event_details(db, visible, user.id)


@router.get("/labels", response_model=list[str])
def get_labels(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = db.query(CalendarEvent).all()
    labels = {label for e in events if e.is_visible_to(user.id) for label in (e.labels or [])}
    return sorted(labels)


@router.post("/events", response_model=EventRead, status_code=201)
def create_event(
    data: EventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if data.end_date < data.start_date:
        raise HTTPException(status_code=400, detail="End date must not be before start date")
    if data.task_id is not None:
        get_task_for_member(db, data.task_id, user)
    ensure_users_exist(db, data.assigned_users)

    event = CalendarEvent(
        title=data.title,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        is_all_day=data.is_all_day,
        task_id=data.task_id,
        created_by=user.id,
        assigned_users=list(data.assigned_users),
        is_private=data.is_private,
        is_completed=False,
        labels=list(data.labels),
        image=data.image,
        color=data.color,
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("event_created", extra={"event_id": event.id, "private": event.is_private})
    return event


@router.patch("/events/{event_id}", response_model=EventRead)
def update_event(
    event_id: int,
    data: EventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = db.get(CalendarEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.created_by != user.id and user.id not in (event.assigned_users or []):
        raise HTTPException(status_code=403, detail="Access denied")

    updates = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    start = updates.get("start_date", event.start_date)
    end = updates.get("end_date", event.end_date)
    if end < start:
        raise HTTPException(status_code=400, detail="End date must not be before start date")
    if "assigned_users" in updates:
        ensure_users_exist(db, updates["assigned_users"])

    for field, value in updates.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    return event


@router.delete("/events/{event_id}", status_code=204)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = db.get(CalendarEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.created_by != user.id:
        raise HTTPException(status_code=403, detail="Only event creator can delete event")

    db.delete(event)
    db.commit()
    return


@router.post("/upload-url", response_model=UploadUrl)
def generate_upload_url(user: User = Depends(get_current_user)):
    return UploadUrl(upload_url=create_upload_url(user))
