from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from taskhub.auth.deps import get_current_user
from taskhub.db import get_db
from taskhub.errors import BadRequest
from taskhub.models.user import User
from taskhub.schemas.common import UserBrief, user_brief

router = APIRouter(prefix="/users", tags=["users"])

SEARCH_LIMIT = 10

def _escape_like(term: str) -> str:
    # % and _ in the query are literal characters, not wildcards
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

# autocomplete for contributor / assignee pickers
@router.get("/search", response_model=list[UserBrief])
def search_users(
    query: str = Query(default=""),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[UserBrief]:
    term = query.strip()
    if len(term) < 2:
        raise BadRequest("search query must be at least 2 characters", "INVALID_QUERY")

    pattern = f"%{_escape_like(term.lower())}%"
    q = (
        select(User)
        .where(or_(User.email.like(pattern, escape="\\"), User.name.ilike(pattern, escape="\\")))
        .order_by(User.name.asc(), User.email.asc())
        .limit(SEARCH_LIMIT)
    )
    return [user_brief(u) for u in db.scalars(q).all()]
