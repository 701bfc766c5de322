import uuid

from fastapi import Depends
from sqlalchemy.orm import Session

from taskhub.auth.deps import get_current_user
from taskhub.db import get_db
from taskhub.errors import Forbidden
from taskhub.models.enums import ProjectRole
from taskhub.models.project import Project
from taskhub.models.user import User
from taskhub.rbac.perms import PERMS, get_user_project_role

class ProjectContext:
    def __init__(self, project: Project, user: User, role: ProjectRole):
        self.project = project
        self.user = user
        self.role = role

def get_project_context(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectContext:
    # unknown project and no access answer the same, so ids can't be probed
    role = get_user_project_role(db, user.id, project_id)
    if role is None:
        raise Forbidden("you do not have access to this project")

    project = db.get(Project, project_id)
    if project is None:
        raise Forbidden("you do not have access to this project")

    return ProjectContext(project=project, user=user, role=role)

def require_perm(action: str):
    allowed = PERMS.get(action)
    if allowed is None:
        raise RuntimeError(f"unknown permission action: {action}")

    def _checker(
        ctx: ProjectContext = Depends(get_project_context),
        db: Session = Depends(get_db),
    ) -> ProjectContext:
        if not allowed(db, ctx.user.id, ctx.project.id):
            raise Forbidden(f"you do not have permission for {action}")
        return ctx

    return _checker
