# taskboard/comment/comment_router.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.comment import Comment
from taskboard.models.user import User
from taskboard.notification.notification_service import notify_all, send_comment_notification
from taskboard.permissions import get_task_for_member
from taskboard.schemas.comment_schema import (
    CommentCreate,
    CommentRead,
    CommentThread,
    CommentUpdate,
    ReplyRead,
)
from taskboard.schemas.user_schema import UserPublic
from taskboard.user.user_router import users_by_id

logger = logging.getLogger("taskboard.comment")

router = APIRouter(prefix="/comments", tags=["comments"])


def _get_own_comment(db: Session, comment_id: int, user: User, action: str) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.author_id != user.id:
        raise HTTPException(status_code=403, detail=f"Only comment author can {action} comment")
    return comment


@router.get("/task/{task_id}", response_model=list[CommentThread])
def list_comments_by_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_task_for_member(db, task_id, user)

    comments = (
        db.query(Comment)
        .filter(Comment.task_id == task_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )
    authors = users_by_id(db, {c.author_id for c in comments})

    def author_of(comment):
        author = authors.get(comment.author_id)
        return UserPublic.model_validate(author) if author else None

    replies: dict[int, list[ReplyRead]] = {}
    for c in comments:
        if c.parent_comment_id is not None:
            replies.setdefault(c.parent_comment_id, []).append(
                ReplyRead(**CommentRead.model_validate(c).model_dump(), author=author_of(c))
            )

    return [
        CommentThread(
            **CommentRead.model_validate(c).model_dump(),
            author=author_of(c),
            replies=replies.get(c.id, []),
        )
        for c in comments
        if c.parent_comment_id is None
    ]


@router.post("/", response_model=CommentRead, status_code=201)
def create_comment(
    data: CommentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task, _ = get_task_for_member(db, data.task_id, user)

    if data.parent_comment_id is not None:
        parent = db.get(Comment, data.parent_comment_id)
        if not parent:
            raise HTTPException(status_code=404, detail="Parent comment not found")
        if parent.task_id != task.id:
            raise HTTPException(status_code=400, detail="Parent comment belongs to another task")
        if parent.parent_comment_id is not None:
            raise HTTPException(status_code=400, detail="Replies cannot be nested")

    comment = Comment(
        task_id=task.id,
        author_id=user.id,
        content=data.content,
        parent_comment_id=data.parent_comment_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    notify_all(
        background_tasks,
        send_comment_notification,
        task.recipients(exclude=user.id),
        task_id=task.id,
        comment_author=user.id,
    )
    return comment


@router.patch("/{comment_id}", response_model=CommentRead)
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    comment = _get_own_comment(db, comment_id, user, "edit")

    comment.content = data.content
    db.commit()
    db.refresh(comment)
    return comment


@router.delete("/{comment_id}", status_code=204)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    comment = _get_own_comment(db, comment_id, user, "delete")

    replies = (
        db.query(Comment)
        .filter(Comment.parent_comment_id == comment.id)
        .delete(synchronize_session=False)
    )
    db.delete(comment)
    db.commit()

    logger.info("comment_deleted", extra={"comment_id": comment_id, "replies_deleted": replies})
    return
