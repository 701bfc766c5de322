import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from taskhub.models.enums import MemberRole, ProjectRole
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.schemas.common import UserBrief, clean_text, user_brief
from taskhub.schemas.tasks import TaskOut

NAME_MIN = 2
NAME_MAX = 100
DESCRIPTION_MAX = 500

def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("project name cannot be empty")
    if len(v) < NAME_MIN:
        raise ValueError(f"project name must be at least {NAME_MIN} characters")
    if len(v) > NAME_MAX:
        raise ValueError(f"project name cannot exceed {NAME_MAX} characters")
    return v

def _check_description(v: str | None) -> str | None:
    v = clean_text(v)
    if v is not None and len(v) > DESCRIPTION_MAX:
        raise ValueError(f"description cannot exceed {DESCRIPTION_MAX} characters")
    return v

class ProjectCreateIn(BaseModel):
    name: str
    description: str | None = None
    contributors: list[EmailStr] = []

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        return _check_description(v)

class ProjectUpdateIn(BaseModel):
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("project name cannot be empty")
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        return _check_description(v)

class ContributorIn(BaseModel):
    email: EmailStr
    role: MemberRole = MemberRole.contributor

class MemberOut(BaseModel):
    user: UserBrief
    role: MemberRole
    joined_at: datetime

class ProjectOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    owner: UserBrief
    members: list[MemberOut]
    task_count: int
    user_role: ProjectRole | None
    created_at: datetime
    updated_at: datetime

class ProjectDetailOut(ProjectOut):
    tasks: list[TaskOut]

def member_out(m: ProjectMember) -> MemberOut:
    return MemberOut(user=user_brief(m.user), role=m.role, joined_at=m.created_at)

def project_out(p: Project, task_count: int, user_role: ProjectRole | None) -> ProjectOut:
    return ProjectOut(
        id=p.id,
        name=p.name,
        description=p.description,
        owner=user_brief(p.owner),
        members=[member_out(m) for m in p.members],
        task_count=task_count,
        user_role=user_role,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )
