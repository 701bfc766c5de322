import uuid

from pydantic import BaseModel

from taskhub.schemas.common import UserBrief
from taskhub.schemas.tasks import TaskOut

class AssignedProjectOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    owner: UserBrief
    tasks: list[TaskOut]

class TaskStatsOut(BaseModel):
    total: int
    urgent: int
    overdue: int
    by_status: dict[str, int]

class ProjectStatsOut(BaseModel):
    total: int

class DashboardStatsOut(BaseModel):
    tasks: TaskStatsOut
    projects: ProjectStatsOut
