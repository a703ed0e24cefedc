# taskboard/notification/notification_router.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.notification import Notification
from taskboard.models.user import User
from taskboard.schemas.notification_schema import NotificationRead, UnreadCount

router = APIRouter(prefix="/notifications", tags=["notifications"])

LIST_LIMIT = 50

# Notifications are only created by the deferred jobs in notification_service;
# there is deliberately no POST here.


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    q = (
        db.query(Notification)
        .filter(Notification.user_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(LIST_LIMIT)
    )
    return q.all()


@router.get("/unread_count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    count = (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == user.id, Notification.is_read == False)  # noqa: E712
        .scalar()
    )
    return {"unread": int(count or 0)}


@router.post("/read_all")
def mark_all_read(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.is_read == False)  # noqa: E712
        .update({"is_read": True})
    )
    db.commit()
    return {"ok": True, "updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    n = db.get(Notification, notification_id)
    if not n:
        raise HTTPException(status_code=404, detail="Notification not found")
    if n.user_id != user.id:
        raise HTTPException(status_code=403, detail="Access denied")

    n.is_read = True
    db.commit()
    db.refresh(n)
    return n
