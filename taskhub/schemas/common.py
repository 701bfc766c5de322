import uuid
from datetime import datetime

from pydantic import BaseModel

from taskhub.models.user import User

class UserBrief(BaseModel):
    id: uuid.UUID
    email: str
    name: str | None

class UserOut(UserBrief):
    created_at: datetime
    updated_at: datetime

def user_brief(u: User) -> UserBrief:
    return UserBrief(id=u.id, email=u.email, name=u.name)

def user_out(u: User) -> UserOut:
    return UserOut(id=u.id, email=u.email, name=u.name, created_at=u.created_at, updated_at=u.updated_at)

def clean_text(value: str | None) -> str | None:
    # blank optional text is stored as null
    if value is None:
        return None
    value = value.strip()
    return value or None
