import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from taskhub.auth.deps import get_current_user
from taskhub.db import atomic, get_db
from taskhub.errors import BadRequest, Conflict, NotFound
from taskhub.models.enums import MemberRole, ProjectRole
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.models.user import User
from taskhub.rbac.deps import ProjectContext, require_perm
from taskhub.rbac.perms import get_user_project_role, is_removable_contributor
from taskhub.schemas.projects import (
    ContributorIn,
    MemberOut,
    ProjectCreateIn,
    ProjectDetailOut,
    ProjectOut,
    ProjectUpdateIn,
    member_out,
    project_out,
)
from taskhub.schemas.tasks import task_out
from taskhub.services.assignments import unassign_from_project
from taskhub.services.tasks import count_tasks, list_project_tasks, list_user_projects

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectOut:
    emails = {e.lower().strip() for e in payload.contributors} - {user.email}

    with atomic(db):
        p = Project(name=payload.name, description=payload.description, owner_id=user.id)
        db.add(p)
        db.flush()

        # unknown emails are skipped, not an error
        if emails:
            for u in db.scalars(select(User).where(User.email.in_(emails))).all():
                db.add(ProjectMember(user_id=u.id, project_id=p.id, role=MemberRole.contributor))

    db.refresh(p)
    logger.info("project %s created by %s with %d contributors", p.id, user.id, len(p.members))
    return project_out(p, task_count=0, user_role=ProjectRole.owner)

@router.get("", response_model=list[ProjectOut])
def list_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    rows = list_user_projects(db, user.id)
    return [
        project_out(p, task_count=count_tasks(db, p.id), user_role=get_user_project_role(db, user.id, p.id))
        for p in rows
    ]

@router.get("/{project_id}", response_model=ProjectDetailOut)
def get_project(
    ctx: ProjectContext = Depends(require_perm("projects:read")),
    db: Session = Depends(get_db),
) -> ProjectDetailOut:
    p = ctx.project
    tasks = list_project_tasks(db, p.id)
    base = project_out(p, task_count=len(tasks), user_role=ctx.role)
    return ProjectDetailOut(**base.model_dump(), tasks=[task_out(t) for t in tasks])

@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    payload: ProjectUpdateIn,
    ctx: ProjectContext = Depends(require_perm("projects:update")),
    db: Session = Depends(get_db),
) -> ProjectOut:
    p = ctx.project
    if "name" in payload.model_fields_set:
        p.name = payload.name
    if "description" in payload.model_fields_set:
        p.description = payload.description

    db.add(p)
    db.commit()
    db.refresh(p)
    return project_out(p, task_count=count_tasks(db, p.id), user_role=ctx.role)

@router.delete("/{project_id}")
def delete_project(
    ctx: ProjectContext = Depends(require_perm("projects:delete")),
    db: Session = Depends(get_db),
) -> dict:
    project_id = ctx.project.id
    with atomic(db):
        db.delete(ctx.project)
    logger.info("project %s deleted by %s", project_id, ctx.user.id)
    return {"deleted": True}

@router.post("/{project_id}/contributors", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def add_contributor(
    payload: ContributorIn,
    ctx: ProjectContext = Depends(require_perm("contributors:manage")),
    db: Session = Depends(get_db),
) -> MemberOut:
    p = ctx.project
    target = db.scalar(select(User).where(User.email == payload.email.lower().strip()))
    if target is None:
        raise NotFound("user not found", "USER_NOT_FOUND")

    # the owner is already a member, just not through a membership row
    existing = db.get(ProjectMember, {"user_id": target.id, "project_id": p.id})
    if existing is not None or target.id == p.owner_id:
        raise Conflict("user is already a member of this project", "USER_ALREADY_MEMBER")

    m = ProjectMember(user_id=target.id, project_id=p.id, role=payload.role)
    db.add(m)
    db.commit()
    db.refresh(m)

    logger.info("user %s added to project %s as %s by %s", target.id, p.id, m.role.value, ctx.user.id)
    return member_out(m)

@router.delete("/{project_id}/contributors/{user_id}")
def remove_contributor(
    user_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("contributors:manage")),
    db: Session = Depends(get_db),
) -> dict:
    p = ctx.project
    if not is_removable_contributor(db, p.id, user_id):
        raise BadRequest("the project owner cannot be removed", "CANNOT_REMOVE_OWNER")

    # removing someone who is not a member is a no-op
    with atomic(db):
        result = db.execute(
            delete(ProjectMember).where(ProjectMember.user_id == user_id, ProjectMember.project_id == p.id)
        )
        # assignees must stay a subset of the members
        if result.rowcount:
            unassign_from_project(db, p.id, user_id)

    if result.rowcount:
        logger.info("user %s removed from project %s by %s", user_id, p.id, ctx.user.id)
    return {"removed": bool(result.rowcount)}
