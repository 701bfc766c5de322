import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from taskhub.db import get_db
from taskhub.errors import Forbidden
from taskhub.models.comment import Comment
from taskhub.rbac.deps import ProjectContext, require_perm
from taskhub.rbac.perms import can_delete_comment, can_edit_comment
from taskhub.schemas.tasks import CommentIn, CommentOut, comment_out
from taskhub.services.tasks import get_comment_in_task, get_task_in_project

router = APIRouter(prefix="/projects/{project_id}/tasks/{task_id}/comments", tags=["comments"])

@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    task_id: uuid.UUID,
    payload: CommentIn,
    ctx: ProjectContext = Depends(require_perm("comments:create")),
    db: Session = Depends(get_db),
) -> CommentOut:
    t = get_task_in_project(db, ctx.project.id, task_id)

    c = Comment(task_id=t.id, author_id=ctx.user.id, content=payload.content)
    db.add(c)
    db.commit()
    db.refresh(c)
    return comment_out(c)

@router.get("", response_model=list[CommentOut])
def list_comments(
    task_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("comments:read")),
    db: Session = Depends(get_db),
) -> list[CommentOut]:
    t = get_task_in_project(db, ctx.project.id, task_id)

    q = select(Comment).where(Comment.task_id == t.id).order_by(Comment.created_at.asc())
    return [comment_out(c) for c in db.scalars(q).all()]

@router.get("/{comment_id}", response_model=CommentOut)
def get_comment(
    task_id: uuid.UUID,
    comment_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("comments:read")),
    db: Session = Depends(get_db),
) -> CommentOut:
    return comment_out(get_comment_in_task(db, ctx.project.id, task_id, comment_id))

@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    task_id: uuid.UUID,
    comment_id: uuid.UUID,
    payload: CommentIn,
    ctx: ProjectContext = Depends(require_perm("comments:read")),
    db: Session = Depends(get_db),
) -> CommentOut:
    c = get_comment_in_task(db, ctx.project.id, task_id, comment_id)

    # only the author edits, whatever their project role
    if not can_edit_comment(c, ctx.user.id):
        raise Forbidden("you can only edit your own comments")

    c.content = payload.content
    db.add(c)
    db.commit()
    db.refresh(c)
    return comment_out(c)

@router.delete("/{comment_id}")
def delete_comment(
    task_id: uuid.UUID,
    comment_id: uuid.UUID,
    ctx: ProjectContext = Depends(require_perm("comments:read")),
    db: Session = Depends(get_db),
) -> dict:
    c = get_comment_in_task(db, ctx.project.id, task_id, comment_id)

    if not can_delete_comment(db, c, ctx.user.id, ctx.project.id):
        raise Forbidden("you can only delete your own comments")

    db.delete(c)
    db.commit()
    return {"deleted": True}
