# taskboard/user/user_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskboard.auth.auth_router import get_current_user
from taskboard.database import get_db
from taskboard.models.user import User
from taskboard.schemas.user_schema import TeamMember

router = APIRouter(prefix="/users", tags=["users"])


# No organisation model yet: every registered user is a potential team member.
@router.get("/", response_model=list[TeamMember])
def list_team_members(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    users = db.query(User).order_by(User.id).all()
    return [
        TeamMember(id=u.id, name=u.display_name, email=u.email, image=u.image)
        for u in users
    ]


def users_by_id(db: Session, ids) -> dict[int, User]:
    """Bulk-load users; ids that do not resolve are simply absent."""
    ids = {i for i in ids if i is not None}
    if not ids:
        return {}
    return {u.id: u for u in db.query(User).filter(User.id.in_(ids)).all()}
