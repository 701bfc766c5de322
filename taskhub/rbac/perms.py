"""Project permission evaluator.

Pure, read-only predicates over the ownership/membership graph. Ownership
lives only in ``Project.owner_id``; ``ProjectMember`` rows carry ADMIN or
CONTRIBUTOR. Role resolution always checks ownership first so an owner is
never mistaken for an outsider just because it has no membership row.

Denial is a normal return value: every predicate answers ``False`` (or
``None`` for :func:`get_user_project_role`) for unknown projects and for
users with no relation to the project. Nothing here is cached; each call
queries the session so membership changes are seen on the next request.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskhub.models.comment import Comment
from taskhub.models.enums import MemberRole, ProjectRole
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project

Predicate = Callable[[Session, uuid.UUID, uuid.UUID], bool]

def _owner_id(db: Session, project_id: uuid.UUID) -> uuid.UUID | None:
    return db.scalar(select(Project.owner_id).where(Project.id == project_id))

def _member_role(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> MemberRole | None:
    # single pk lookup on (user_id, project_id)
    return db.scalar(
        select(ProjectMember.role).where(
            ProjectMember.user_id == user_id,
            ProjectMember.project_id == project_id,
        )
    )

def get_user_project_role(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> ProjectRole | None:
    owner_id = _owner_id(db, project_id)
    if owner_id is None:
        return None
    if owner_id == user_id:
        return ProjectRole.owner

    role = _member_role(db, user_id, project_id)
    if role is None:
        return None
    return ProjectRole(role.value)

def is_project_owner(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return _owner_id(db, project_id) == user_id

def is_project_admin(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    # ownership does not imply this, owner is a separate, higher tier
    return _member_role(db, user_id, project_id) == MemberRole.admin

def has_project_access(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return get_user_project_role(db, user_id, project_id) is not None

def can_modify_project(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return is_project_owner(db, user_id, project_id) or is_project_admin(db, user_id, project_id)

def can_delete_project(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return is_project_owner(db, user_id, project_id)

def can_create_tasks(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return has_project_access(db, user_id, project_id)

def can_modify_tasks(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    # any member may edit or delete any task in the project
    return has_project_access(db, user_id, project_id)

# route action -> predicate
PERMS: dict[str, Predicate] = {
    "projects:read": has_project_access,
    "projects:update": can_modify_project,
    "projects:delete": can_delete_project,
    "contributors:manage": can_modify_project,

    "tasks:create": can_create_tasks,
    "tasks:read": has_project_access,
    "tasks:update": can_modify_tasks,
    "tasks:delete": can_modify_tasks,

    "comments:create": has_project_access,
    "comments:read": has_project_access,
}

def can_edit_comment(comment: Comment, user_id: uuid.UUID) -> bool:
    return comment.author_id == user_id

def can_delete_comment(db: Session, comment: Comment, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    return comment.author_id == user_id or can_modify_tasks(db, user_id, project_id)

def is_removable_contributor(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """False when ``user_id`` owns the project.

    Checked explicitly: the owner has no membership row, so deleting by
    (user, project) would otherwise silently match nothing.
    """
    return not is_project_owner(db, user_id, project_id)

def are_project_members(db: Session, project_id: uuid.UUID, user_ids: Iterable[uuid.UUID]) -> bool:
    """True when every id is the owner or holds a membership row in this project."""
    wanted = set(user_ids)
    if not wanted:
        return True

    owner_id = _owner_id(db, project_id)
    if owner_id is None:
        return False

    members = set(
        db.scalars(
            select(ProjectMember.user_id).where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id.in_(wanted),
            )
        )
    )
    members.add(owner_id)
    return wanted <= members
