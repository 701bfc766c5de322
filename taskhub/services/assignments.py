"""Task assignee reconciliation.

The declared assignee list always replaces the stored one. Only the
difference is written: rows that disappear are deleted, new ones are
inserted, unchanged rows are left alone. Nothing here commits; callers wrap
the call (together with the rest of the task write) in
:func:`taskhub.db.atomic` so readers never see a half-applied set.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from taskhub.errors import BadRequest
from taskhub.models.task import Task
from taskhub.models.task_assignment import TaskAssignment
from taskhub.rbac.perms import are_project_members

logger = logging.getLogger(__name__)

def get_assignee_ids(db: Session, task_id: uuid.UUID) -> set[uuid.UUID]:
    return set(db.scalars(select(TaskAssignment.user_id).where(TaskAssignment.task_id == task_id)))

def ensure_assignable(db: Session, project_id: uuid.UUID, user_ids: Iterable[uuid.UUID]) -> None:
    # all or nothing: one stranger rejects the whole list
    if not are_project_members(db, project_id, user_ids):
        raise BadRequest("some assignees are not members of this project", "INVALID_ASSIGNEES")

def _remove_assignments(db: Session, task_id: uuid.UUID, user_ids: set[uuid.UUID]) -> None:
    if not user_ids:
        return
    db.execute(
        delete(TaskAssignment).where(
            TaskAssignment.task_id == task_id,
            TaskAssignment.user_id.in_(user_ids),
        )
    )

def _add_assignments(db: Session, task_id: uuid.UUID, user_ids: set[uuid.UUID]) -> None:
    for user_id in sorted(user_ids, key=str):
        db.add(TaskAssignment(task_id=task_id, user_id=user_id))

def replace_assignees(db: Session, task_id: uuid.UUID, declared: Iterable[uuid.UUID]) -> tuple[set[uuid.UUID], set[uuid.UUID]]:
    """Make the task's assignment rows equal ``declared``.

    Returns the ``(removed, added)`` user id sets. Membership must already
    have been checked with :func:`ensure_assignable`.
    """
    current = get_assignee_ids(db, task_id)
    wanted = set(declared)

    removed = current - wanted
    added = wanted - current

    _remove_assignments(db, task_id, removed)
    _add_assignments(db, task_id, added)
    db.flush()

    if removed or added:
        logger.info(
            "task %s assignees reconciled: %d removed, %d added, %d kept",
            task_id, len(removed), len(added), len(current & wanted),
        )
    return removed, added

def unassign_from_project(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> int:
    """Drop every assignment ``user_id`` holds on tasks of ``project_id``.

    Called when a member leaves so assignees stay a subset of the project's
    members. Does not commit.
    """
    project_tasks = select(Task.id).where(Task.project_id == project_id)
    result = db.execute(
        delete(TaskAssignment)
        .where(TaskAssignment.user_id == user_id, TaskAssignment.task_id.in_(project_tasks))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("user %s unassigned from %d tasks in project %s", user_id, result.rowcount, project_id)
    return result.rowcount
