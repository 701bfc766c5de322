import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskhub.db import atomic, get_db
from taskhub.models.task import Task
from taskhub.rbac.deps import ProjectContext, require_perm
from taskhub.schemas.tasks import TaskCreateIn, TaskOut, TaskUpdateIn, task_out
from taskhub.services.assignments import ensure_assignable, replace_assignees
from taskhub.services.tasks import get_task_in_project, list_project_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects/{project_id}/tasks", tags=["tasks"])

@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreateIn,
    ctx: ProjectContext = Depends(require_perm("tasks:create")),
    db: Session = Depends(get_db),
) -> TaskOut:
    ensure_assignable(db, ctx.project.id, payload.assignee_ids)

    with atomic(db):
        t = Task(
            project_id=ctx.project.id,
            title=payload.title,
            description=payload.description,
            priority=payload.priority,
            due_date=payload.due_date,
            creator_id=ctx.user.id,
        )
        db.add(t)
        db.flush()
        replace_assignees(db, t.id, payload.assignee_ids)

    db.refresh(t)
    return task_out(t)

@router.get("", response_model=list[TaskOut])
def list_tasks(
    ctx: ProjectContext = Depends(require_perm("tasks:read")),
    db: Session = Depends(get_db),
) -> list[TaskOut]:
    return [task_out(t) for t in list_project_tasks(db, ctx.project.id)]

@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("tasks:read")),
    db: Session = Depends(get_db),
) -> TaskOut:
    return task_out(get_task_in_project(db, ctx.project.id, task_id))

@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: uuid.UUID,
    payload: TaskUpdateIn,
    ctx: ProjectContext = Depends(require_perm("tasks:update")),
    db: Session = Depends(get_db),
) -> TaskOut:
    t = get_task_in_project(db, ctx.project.id, task_id)

    fields = payload.model_fields_set
    # explicit null clears the assignee list
    assignees = None
    if "assignee_ids" in fields:
        assignees = payload.assignee_ids or []
        ensure_assignable(db, ctx.project.id, assignees)

    with atomic(db):
        if "title" in fields:
            t.title = payload.title
        if "description" in fields:
            t.description = payload.description
        if "status" in fields and payload.status is not None:
            t.status = payload.status
        if "priority" in fields and payload.priority is not None:
            t.priority = payload.priority
        # allow explicit due date removal by sending null
        if "due_date" in fields:
            t.due_date = payload.due_date
        db.add(t)
        db.flush()

        if assignees is not None:
            replace_assignees(db, t.id, assignees)

    db.refresh(t)
    return task_out(t)

@router.delete("/{task_id}")
def delete_task(
    task_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("tasks:delete")),
    db: Session = Depends(get_db),
) -> dict:
    t = get_task_in_project(db, ctx.project.id, task_id)
    with atomic(db):
        db.delete(t)
    logger.info("task %s deleted from project %s by %s", task_id, ctx.project.id, ctx.user.id)
    return {"deleted": True}
