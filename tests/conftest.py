import os
import uuid

# the app builds its engine at import time, keep it off postgres
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from taskhub.config import settings
from taskhub.db import get_db
from taskhub.main import create_app
from taskhub.models import Base
from taskhub.models.enums import MemberRole
from taskhub.models.membership import ProjectMember
from taskhub.models.user import User

PASSWORD = "Password123"

@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", False)
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)

@pytest.fixture()
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()

@pytest.fixture()
def db_session(session_factory) -> Session:
    session: Session = session_factory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture()
def app(session_factory):
    app = create_app()

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    return app

@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)

def register(client, email: str, name: str | None = None) -> dict:
    body = {"email": email, "password": PASSWORD}
    if name is not None:
        body["name"] = name
    r = client.post("/auth/register", json=body)
    assert r.status_code == 201, r.text
    return r.json()

def auth(jwt: str) -> dict[str, str]:
    return {"authorization": f"bearer {jwt}"}

class Account:
    def __init__(self, data: dict):
        self.id = uuid.UUID(data["user"]["id"])
        self.email = data["user"]["email"]
        self.token = data["access_token"]

    @property
    def headers(self) -> dict[str, str]:
        return auth(self.token)

def make_account(client, email: str, name: str | None = None) -> Account:
    return Account(register(client, email, name))

def add_member(db: Session, email: str, project_id, role: MemberRole) -> None:
    user = db.scalar(select(User).where(User.email == email.lower()))
    assert user is not None

    # direct db insert, the api path is covered separately
    db.add(ProjectMember(user_id=user.id, project_id=uuid.UUID(str(project_id)), role=role))
    db.commit()

@pytest.fixture()
def team(client, db_session):
    """Owner, admin, contributor and an outsider around one project."""
    owner = make_account(client, "owner@example.com", "Owner")
    admin = make_account(client, "admin@example.com", "Admin")
    contributor = make_account(client, "contributor@example.com", "Contributor")
    stranger = make_account(client, "stranger@example.com", "Stranger")

    r = client.post("/projects", json={"name": "shared project"}, headers=owner.headers)
    assert r.status_code == 201, r.text
    project_id = r.json()["id"]

    add_member(db_session, admin.email, project_id, MemberRole.admin)
    add_member(db_session, contributor.email, project_id, MemberRole.contributor)

    return {
        "project_id": project_id,
        "owner": owner,
        "admin": admin,
        "contributor": contributor,
        "stranger": stranger,
    }
