"""
Pytest configuration and shared fixtures.

The environment is pointed at a throwaway SQLite file and upload directory
before the app is imported; the schema is recreated for every test.
"""

import os
import tempfile
from types import SimpleNamespace

_TMP = tempfile.mkdtemp(prefix="taskboard-tests-")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["STORAGE_DIR"] = os.path.join(_TMP, "uploads")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MAX_UPLOAD_BYTES"] = "1024"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from taskboard.auth.auth_router import create_access_token  # noqa: E402
from taskboard.database import Base, SessionLocal, engine, init_db  # noqa: E402
from taskboard.main import app  # noqa: E402
from taskboard.models.notification import Notification  # noqa: E402
from taskboard.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user():
    """Insert a user directly and return its id plus ready-made auth headers."""

    def _make(name="Alice", email=None):
        with SessionLocal() as session:
            user = User(
                email=email or f"{name.lower()}@example.com",
                name=name,
                password_hash="!",
            )
            session.add(user)
            session.commit()
            user_id = user.id
        token = create_access_token(str(user_id))
        return SimpleNamespace(
            id=user_id,
            name=name,
            headers={"Authorization": f"Bearer {token}"},
        )

    return _make


@pytest.fixture
def make_project(client):
    def _make(owner, members=(), name="Apollo", color="#ff0000"):
        response = client.post("/projects/", json={"name": name, "color": color}, headers=owner.headers)
        assert response.status_code == 201, response.text
        project = response.json()
        for member in members:
            r = client.post(
                f"/projects/{project['id']}/members",
                json={"user_id": member.id},
                headers=owner.headers,
            )
            assert r.status_code == 200, r.text
        return project

    return _make


@pytest.fixture
def make_task(client):
    def _make(actor, project_id, title="Write docs", **fields):
        payload = {"title": title, "project_id": project_id, "priority": "medium", **fields}
        response = client.post("/tasks/", json=payload, headers=actor.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def notifications_for():
    """Notification rows for a user, read in a fresh session."""

    def _fetch(user):
        with SessionLocal() as session:
            rows = (
                session.query(Notification)
                .filter(Notification.user_id == user.id)
                .order_by(Notification.id)
                .all()
            )
            return [
                SimpleNamespace(type=n.type, task_id=n.task_id, title=n.title, message=n.message)
                for n in rows
            ]

    return _fetch
