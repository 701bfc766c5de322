from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskhub.auth.deps import get_current_user
from taskhub.db import get_db
from taskhub.models.user import User
from taskhub.schemas.common import user_brief
from taskhub.schemas.dashboard import AssignedProjectOut, DashboardStatsOut
from taskhub.schemas.tasks import TaskOut, task_out
from taskhub.services.tasks import assigned_task_stats, list_assigned_tasks, list_projects_with_assigned_tasks

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

# everything here is scoped to tasks assigned to the caller

@router.get("/tasks", response_model=list[TaskOut])
def assigned_tasks(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[TaskOut]:
    return [task_out(t) for t in list_assigned_tasks(db, user.id)]

@router.get("/projects", response_model=list[AssignedProjectOut])
def projects_with_assigned_tasks(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[AssignedProjectOut]:
    return [
        AssignedProjectOut(
            id=p.id,
            name=p.name,
            description=p.description,
            owner=user_brief(p.owner),
            tasks=[task_out(t) for t in list_assigned_tasks(db, user.id, project_id=p.id)],
        )
        for p in list_projects_with_assigned_tasks(db, user.id)
    ]

@router.get("/stats", response_model=DashboardStatsOut)
def stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DashboardStatsOut:
    return DashboardStatsOut.model_validate(assigned_task_stats(db, user.id))
