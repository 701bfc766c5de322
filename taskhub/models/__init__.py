from taskhub.models.base import Base
from taskhub.models.comment import Comment
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.models.task import Task
from taskhub.models.task_assignment import TaskAssignment
from taskhub.models.user import User

__all__ = ["Base", "User", "Project", "ProjectMember", "Task", "TaskAssignment", "Comment"]
