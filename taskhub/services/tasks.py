import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import func, nulls_last, or_, select
from sqlalchemy.orm import Session

from taskhub.errors import NotFound
from taskhub.models.comment import Comment
from taskhub.models.enums import TaskPriority, TaskStatus
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.models.task import Task, priority_rank
from taskhub.models.task_assignment import TaskAssignment

URGENT_PRIORITIES = (TaskPriority.high, TaskPriority.urgent)

def get_task_in_project(db: Session, project_id: uuid.UUID, task_id: uuid.UUID) -> Task:
    t = db.scalar(select(Task).where(Task.id == task_id, Task.project_id == project_id))
    if t is None:
        raise NotFound("task not found", "TASK_NOT_FOUND")
    return t

def get_comment_in_task(db: Session, project_id: uuid.UUID, task_id: uuid.UUID, comment_id: uuid.UUID) -> Comment:
    c = db.scalar(
        select(Comment)
        .join(Task, Task.id == Comment.task_id)
        .where(Comment.id == comment_id, Comment.task_id == task_id, Task.project_id == project_id)
    )
    if c is None:
        raise NotFound("comment not found", "COMMENT_NOT_FOUND")
    return c

def list_project_tasks(db: Session, project_id: uuid.UUID) -> Sequence[Task]:
    q = (
        select(Task)
        .where(Task.project_id == project_id)
        .order_by(priority_rank.desc(), Task.created_at.desc())
    )
    return db.scalars(q).all()

def count_tasks(db: Session, project_id: uuid.UUID) -> int:
    return db.scalar(select(func.count()).select_from(Task).where(Task.project_id == project_id)) or 0

def list_user_projects(db: Session, user_id: uuid.UUID) -> Sequence[Project]:
    member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    q = (
        select(Project)
        .where(or_(Project.owner_id == user_id, Project.id.in_(member_of)))
        .order_by(Project.updated_at.desc())
    )
    return db.scalars(q).unique().all()

def _assigned_to(user_id: uuid.UUID):
    return Task.id.in_(select(TaskAssignment.task_id).where(TaskAssignment.user_id == user_id))

def list_assigned_tasks(db: Session, user_id: uuid.UUID, project_id: uuid.UUID | None = None) -> Sequence[Task]:
    q = select(Task).where(_assigned_to(user_id))
    if project_id is not None:
        q = q.where(Task.project_id == project_id)
    q = q.order_by(priority_rank.desc(), nulls_last(Task.due_date.asc()), Task.created_at.desc())
    return db.scalars(q).unique().all()

def list_projects_with_assigned_tasks(db: Session, user_id: uuid.UUID) -> Sequence[Project]:
    q = (
        select(Project)
        .where(Project.id.in_(select(Task.project_id).where(_assigned_to(user_id))))
        .order_by(Project.name.asc())
    )
    return db.scalars(q).unique().all()

def assigned_task_stats(db: Session, user_id: uuid.UUID) -> dict:
    assigned = _assigned_to(user_id)
    now = datetime.now(timezone.utc)

    total = db.scalar(select(func.count()).select_from(Task).where(assigned)) or 0
    urgent = db.scalar(
        select(func.count()).select_from(Task).where(assigned, Task.priority.in_(URGENT_PRIORITIES))
    ) or 0
    overdue = db.scalar(
        select(func.count())
        .select_from(Task)
        .where(assigned, Task.due_date.is_not(None), Task.due_date < now, Task.status != TaskStatus.done)
    ) or 0

    by_status = {s.value: 0 for s in TaskStatus}
    for status, n in db.execute(select(Task.status, func.count()).where(assigned).group_by(Task.status)):
        by_status[status.value] = n

    projects = db.scalar(
        select(func.count(func.distinct(Task.project_id))).where(assigned)
    ) or 0

    return {
        "tasks": {"total": total, "urgent": urgent, "overdue": overdue, "by_status": by_status},
        "projects": {"total": projects},
    }
