from enum import Enum

class MemberRole(str, Enum):
    admin = "ADMIN"
    contributor = "CONTRIBUTOR"

# resolved role of a user in a project; owner is never stored as a membership
class ProjectRole(str, Enum):
    owner = "OWNER"
    admin = "ADMIN"
    contributor = "CONTRIBUTOR"

class TaskStatus(str, Enum):
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    done = "DONE"
    cancelled = "CANCELLED"

class TaskPriority(str, Enum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    urgent = "URGENT"

PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.low: 0,
    TaskPriority.medium: 1,
    TaskPriority.high: 2,
    TaskPriority.urgent: 3,
}

def enum_values(enum_cls: type[Enum]) -> list[str]:
    return [m.value for m in enum_cls]
