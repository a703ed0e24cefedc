# taskboard/category/category_router.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.category import Category
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.permissions import get_project_for_member
from taskboard.schemas.category_schema import CategoryCreate, CategoryRead, CategoryUpdate

logger = logging.getLogger("taskboard.category")

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_category_for_member(db: Session, category_id: int, user: User) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    get_project_for_member(db, category.project_id, user)
    return category


def next_category_order(db: Session, project_id: int) -> int:
    current = (
        db.query(func.max(Category.order))
        .filter(Category.project_id == project_id)
        .scalar()
    )
    return 0 if current is None else current + 1


@router.get("/project/{project_id}", response_model=list[CategoryRead])
def list_categories_by_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_project_for_member(db, project_id, user)
    return (
        db.query(Category)
        .filter(Category.project_id == project_id)
        .order_by(Category.order, Category.id)
        .all()
    )


@router.post("/", response_model=CategoryRead, status_code=201)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_project_for_member(db, data.project_id, user)

    category = Category(
        name=data.name,
        color=data.color,
        project_id=data.project_id,
        order=next_category_order(db, data.project_id),
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    category = _get_category_for_member(db, category_id, user)

    if data.name is not None:
        category.name = data.name
    if data.color is not None:
        category.color = data.color

    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    category = _get_category_for_member(db, category_id, user)

    # tasks fall back to "uncategorized" instead of being deleted
    moved = (
        db.query(Task)
        .filter(Task.category_id == category.id)
        .update({Task.category_id: None}, synchronize_session=False)
    )

    db.delete(category)
    db.commit()

    logger.info("category_deleted", extra={"category_id": category_id, "tasks_uncategorized": moved})
    return
