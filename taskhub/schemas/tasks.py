import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, field_validator

from taskhub.models.comment import Comment
from taskhub.models.enums import TaskPriority, TaskStatus
from taskhub.models.task import Task
from taskhub.schemas.common import UserBrief, clean_text, user_brief

TITLE_MIN = 2
TITLE_MAX = 200
DESCRIPTION_MAX = 1000
CONTENT_MAX = 2000

def _check_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("task title cannot be empty")
    if len(v) < TITLE_MIN:
        raise ValueError(f"task title must be at least {TITLE_MIN} characters")
    if len(v) > TITLE_MAX:
        raise ValueError(f"task title cannot exceed {TITLE_MAX} characters")
    return v

def _check_description(v: str | None) -> str | None:
    v = clean_text(v)
    if v is not None and len(v) > DESCRIPTION_MAX:
        raise ValueError(f"description cannot exceed {DESCRIPTION_MAX} characters")
    return v

def _to_utc(v: datetime | None) -> datetime | None:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)

def _check_content(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("comment content cannot be empty")
    if len(v) > CONTENT_MAX:
        raise ValueError(f"comment content cannot exceed {CONTENT_MAX} characters")
    return v

class TaskCreateIn(BaseModel):
    title: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.medium
    due_date: datetime | None = None
    assignee_ids: list[uuid.UUID] = []

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        return _check_description(v)

    @field_validator("due_date")
    @classmethod
    def _due_date(cls, v: datetime | None) -> datetime | None:
        return _to_utc(v)

class TaskUpdateIn(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assignee_ids: list[uuid.UUID] | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("task title cannot be empty")
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        return _check_description(v)

    @field_validator("due_date")
    @classmethod
    def _due_date(cls, v: datetime | None) -> datetime | None:
        return _to_utc(v)

class CommentIn(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        return _check_content(v)

class CommentOut(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    content: str
    author: UserBrief
    created_at: datetime
    updated_at: datetime

class TaskOut(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    creator: UserBrief
    assignees: list[UserBrief]
    comments: list[CommentOut]
    created_at: datetime
    updated_at: datetime

def comment_out(c: Comment) -> CommentOut:
    return CommentOut(
        id=c.id,
        task_id=c.task_id,
        content=c.content,
        author=user_brief(c.author),
        created_at=c.created_at,
        updated_at=c.updated_at,
    )

def task_out(t: Task) -> TaskOut:
    return TaskOut(
        id=t.id,
        project_id=t.project_id,
        title=t.title,
        description=t.description,
        status=t.status,
        priority=t.priority,
        due_date=t.due_date,
        creator=user_brief(t.creator),
        assignees=[user_brief(a.user) for a in t.assignments],
        comments=[comment_out(c) for c in t.comments],
        created_at=t.created_at,
        updated_at=t.updated_at,
    )
