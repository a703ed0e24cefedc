from __future__ import annotations

import logging
from typing import Callable

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from taskboard import database
from taskboard.models.notification import Notification
from taskboard.models.task import Task
from taskboard.models.user import User

logger = logging.getLogger("taskboard.notification")


def create_notification(
    db: Session,
    *,
    user_id: int,
    type: str,
    title: str,
    message: str,
    task_id: int | None = None,
) -> Notification:
    n = Notification(
        user_id=user_id,
        task_id=task_id,
        type=type,
        title=title,
        message=message,
        is_read=False,
    )
    db.add(n)
    db.flush()
    return n


# -------------------------
# Internal jobs (run only through schedule())
# -------------------------

def send_task_assigned_notification(db: Session, *, user_id: int, task_id: int, assigned_by: int):
    task = db.get(Task, task_id)
    assigner = db.get(User, assigned_by)
    if not task or not assigner:
        return None

    return create_notification(
        db,
        user_id=user_id,
        type="task_assigned",
        title="New Task Assigned",
        message=f'{assigner.name or assigner.email} assigned you to "{task.title}"',
        task_id=task_id,
    )


def send_task_updated_notification(db: Session, *, user_id: int, task_id: int, updated_by: int):
    task = db.get(Task, task_id)
    updater = db.get(User, updated_by)
    if not task or not updater:
        return None

    return create_notification(
        db,
        user_id=user_id,
        type="task_updated",
        title="Task Updated",
        message=f'{updater.name or updater.email} updated "{task.title}"',
        task_id=task_id,
    )


def send_comment_notification(db: Session, *, user_id: int, task_id: int, comment_author: int):
    task = db.get(Task, task_id)
    author = db.get(User, comment_author)
    if not task or not author:
        return None

    return create_notification(
        db,
        user_id=user_id,
        type="comment_added",
        title="New Comment",
        message=f'{author.name or author.email} commented on "{task.title}"',
        task_id=task_id,
    )


# -------------------------
# Outbound queue
# -------------------------

def run_job(job: Callable, payload: dict) -> None:
    """
    Execute one deferred job in its own session.

    Failures are logged and absorbed: the request that scheduled the job
    has already committed and answered. There is no idempotency key, a
    retried job may insert a duplicate notification.
    """
    db = database.SessionLocal()
    try:
        job(db, **payload)
        db.commit()
        logger.info("notification_job_completed", extra={"job": job.__name__, **payload})
    except Exception:
        db.rollback()
        logger.exception("notification_job_failed", extra={"job": job.__name__, **payload})
    finally:
        db.close()


def schedule(background_tasks: BackgroundTasks, job: Callable, **payload) -> None:
    background_tasks.add_task(run_job, job, payload)
    logger.debug("notification_job_scheduled", extra={"job": job.__name__, **payload})


def notify_all(background_tasks: BackgroundTasks, job: Callable, recipients, **payload) -> None:
    for user_id in recipients:
        schedule(background_tasks, job, user_id=user_id, **payload)
