import uuid

import pytest
from sqlalchemy.orm import Session

from taskhub.auth.passwords import hash_password
from taskhub.models.comment import Comment
from taskhub.models.enums import MemberRole, ProjectRole
from taskhub.models.membership import ProjectMember
from taskhub.models.project import Project
from taskhub.models.task import Task
from taskhub.models.user import User
from taskhub.rbac import perms

def _user(db: Session, email: str) -> User:
    u = User(email=email, password_hash=hash_password("Password123"))
    db.add(u)
    db.flush()
    return u

@pytest.fixture()
def graph(db_session: Session):
    owner = _user(db_session, "owner@example.com")
    admin = _user(db_session, "admin@example.com")
    contributor = _user(db_session, "contributor@example.com")
    stranger = _user(db_session, "stranger@example.com")

    project = Project(name="perm project", owner_id=owner.id)
    db_session.add(project)
    db_session.flush()

    db_session.add_all(
        [
            ProjectMember(user_id=admin.id, project_id=project.id, role=MemberRole.admin),
            ProjectMember(user_id=contributor.id, project_id=project.id, role=MemberRole.contributor),
        ]
    )
    db_session.commit()

    return {
        "project": project.id,
        "owner": owner.id,
        "admin": admin.id,
        "contributor": contributor.id,
        "stranger": stranger.id,
    }

# who -> (role, access, modify project, delete project, create tasks, modify tasks, admin)
EXPECTED = {
    "owner": (ProjectRole.owner, True, True, True, True, True, False),
    "admin": (ProjectRole.admin, True, True, False, True, True, True),
    "contributor": (ProjectRole.contributor, True, False, False, True, True, False),
    "stranger": (None, False, False, False, False, False, False),
}

@pytest.mark.parametrize("who", sorted(EXPECTED))
def test_permission_table(db_session: Session, graph, who: str):
    user_id = graph[who]
    project_id = graph["project"]
    role, access, modify, delete, create_tasks, modify_tasks, admin = EXPECTED[who]

    assert perms.get_user_project_role(db_session, user_id, project_id) == role
    assert perms.has_project_access(db_session, user_id, project_id) is access
    assert perms.can_modify_project(db_session, user_id, project_id) is modify
    assert perms.can_delete_project(db_session, user_id, project_id) is delete
    assert perms.can_create_tasks(db_session, user_id, project_id) is create_tasks
    assert perms.can_modify_tasks(db_session, user_id, project_id) is modify_tasks
    assert perms.is_project_admin(db_session, user_id, project_id) is admin
    assert perms.is_project_owner(db_session, user_id, project_id) is (who == "owner")

def test_unknown_project_denies_everything(db_session: Session, graph):
    missing = uuid.uuid4()
    for who in ("owner", "admin", "contributor", "stranger"):
        user_id = graph[who]
        assert perms.get_user_project_role(db_session, user_id, missing) is None
        assert perms.has_project_access(db_session, user_id, missing) is False
        assert perms.can_modify_project(db_session, user_id, missing) is False
        assert perms.can_delete_project(db_session, user_id, missing) is False
        assert perms.can_create_tasks(db_session, user_id, missing) is False
        assert perms.can_modify_tasks(db_session, user_id, missing) is False

def test_ownership_wins_over_membership_row(db_session: Session, graph):
    # a stray admin row for the owner must not demote them
    db_session.add(ProjectMember(user_id=graph["owner"], project_id=graph["project"], role=MemberRole.admin))
    db_session.commit()

    assert perms.get_user_project_role(db_session, graph["owner"], graph["project"]) == ProjectRole.owner
    assert perms.can_delete_project(db_session, graph["owner"], graph["project"]) is True

def test_membership_changes_are_seen_immediately(db_session: Session, graph):
    project_id = graph["project"]
    contributor = graph["contributor"]
    assert perms.can_modify_project(db_session, contributor, project_id) is False

    m = db_session.get(ProjectMember, {"user_id": contributor, "project_id": project_id})
    m.role = MemberRole.admin
    db_session.commit()
    assert perms.can_modify_project(db_session, contributor, project_id) is True

    db_session.delete(m)
    db_session.commit()
    assert perms.has_project_access(db_session, contributor, project_id) is False

def test_owner_is_never_removable(db_session: Session, graph):
    project_id = graph["project"]
    assert perms.is_removable_contributor(db_session, project_id, graph["owner"]) is False
    assert perms.is_removable_contributor(db_session, project_id, graph["admin"]) is True
    assert perms.is_removable_contributor(db_session, project_id, graph["stranger"]) is True

def test_are_project_members(db_session: Session, graph):
    project_id = graph["project"]
    assert perms.are_project_members(db_session, project_id, []) is True
    assert perms.are_project_members(db_session, project_id, [graph["owner"], graph["contributor"]]) is True
    assert perms.are_project_members(db_session, project_id, [graph["admin"], graph["stranger"]]) is False
    assert perms.are_project_members(db_session, uuid.uuid4(), [graph["owner"]]) is False

def test_comment_edit_and_delete_rules(db_session: Session, graph):
    project_id = graph["project"]
    t = Task(project_id=project_id, title="commented", creator_id=graph["owner"])
    db_session.add(t)
    db_session.flush()
    c = Comment(task_id=t.id, author_id=graph["contributor"], content="hello")
    db_session.add(c)
    db_session.commit()

    assert perms.can_edit_comment(c, graph["contributor"]) is True
    assert perms.can_edit_comment(c, graph["owner"]) is False

    assert perms.can_delete_comment(db_session, c, graph["contributor"], project_id) is True
    assert perms.can_delete_comment(db_session, c, graph["admin"], project_id) is True
    assert perms.can_delete_comment(db_session, c, graph["stranger"], project_id) is False

def test_every_action_maps_to_a_predicate():
    for action, predicate in perms.PERMS.items():
        assert ":" in action
        assert callable(predicate)
