import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskhub.auth.passwords import hash_password
from taskhub.db import SessionLocal
from taskhub.models.enums import MemberRole, TaskPriority
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.models.task import Task
from taskhub.models.user import User
from taskhub.services.assignments import replace_assignees

# every seeded account shares this password
SEED_PASSWORD = "Password123"

@dataclass
class SeedResult:
    owner_email: str
    admin_email: str
    contributor_email: str
    project_id: uuid.UUID
    task_id: uuid.UUID

def get_or_create_user(db: Session, email: str, name: str | None = None) -> User:
    email = email.lower().strip()
    u = db.scalar(select(User).where(User.email == email))
    if u is None:
        u = User(email=email, name=name, password_hash=hash_password(SEED_PASSWORD))
        db.add(u)
        db.flush()
    return u

def get_or_create_membership(db: Session, user_id: uuid.UUID, project_id: uuid.UUID, role: MemberRole) -> ProjectMember:
    m = db.get(ProjectMember, {"user_id": user_id, "project_id": project_id})
    if m is None:
        m = ProjectMember(user_id=user_id, project_id=project_id, role=role)
        db.add(m)
        db.flush()
    elif m.role != role:
        m.role = role
        db.add(m)
        db.flush()
    return m

def get_or_create_project(db: Session, owner_id: uuid.UUID, name: str) -> Project:
    p = db.scalar(select(Project).where(Project.owner_id == owner_id, Project.name == name))
    if p is None:
        p = Project(owner_id=owner_id, name=name, description="created by scripts/seed.py")
        db.add(p)
        db.flush()
    return p

def get_or_create_task(
    db: Session,
    project_id: uuid.UUID,
    title: str,
    creator_id: uuid.UUID,
    assignee_ids: list[uuid.UUID],
) -> Task:
    t = db.scalar(select(Task).where(Task.project_id == project_id, Task.title == title))
    if t is None:
        t = Task(project_id=project_id, title=title, creator_id=creator_id, priority=TaskPriority.high)
        db.add(t)
        db.flush()
    # keep it stable if you re-run seed
    replace_assignees(db, t.id, assignee_ids)
    return t

def seed() -> SeedResult:
    db = SessionLocal()
    try:
        owner = get_or_create_user(db, "owner@example.com", "owner")
        admin = get_or_create_user(db, "admin@example.com", "admin")
        contributor = get_or_create_user(db, "contributor@example.com", "contributor")

        project = get_or_create_project(db, owner.id, "seeded project")

        get_or_create_membership(db, admin.id, project.id, MemberRole.admin)
        get_or_create_membership(db, contributor.id, project.id, MemberRole.contributor)

        task = get_or_create_task(
            db,
            project.id,
            "seeded task",
            creator_id=owner.id,
            assignee_ids=[contributor.id],
        )

        db.commit()

        return SeedResult(
            owner_email=owner.email,
            admin_email=admin.email,
            contributor_email=contributor.email,
            project_id=project.id,
            task_id=task.id,
        )
    finally:
        db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"project_id={r.project_id}")
    print(f"task_id={r.task_id}")
    print(f"users (password {SEED_PASSWORD}):")
    print(f"  owner:       {r.owner_email}")
    print(f"  admin:       {r.admin_email}")
    print(f"  contributor: {r.contributor_email}")
