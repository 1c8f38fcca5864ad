from datetime import datetime, timedelta, timezone

import httpx
import pytest
from httpx import ASGITransport

from classsync.core.security import create_access_token, hash_password
from classsync.main import create_app
from classsync.schemas.assignment import Assignment
from classsync.schemas.context import UserContext
from classsync.schemas.user import Role, User

from fakes import FakeAssignmentRepo, FakeNotificationRepo, FakeSubmissionRepo, FakeUserRepo

PASSWORD = "password123"


def make_user(user_id: str, role: Role, **overrides) -> User:
    base = dict(
        id=user_id,
        name=f"User {user_id}",
        email=f"{user_id}@school.edu",
        passwordHash=hash_password(PASSWORD),
        role=role,
        isActive=True,
        createdAt=datetime.now(timezone.utc),
    )
    base.update(overrides)
    return User(**base)


def make_assignment(assignment_id: str, teacher_id: str, **overrides) -> Assignment:
    now = datetime.now(timezone.utc)
    base = dict(
        id=assignment_id,
        title=f"Compito {assignment_id}",
        description="Desc",
        dueDate=now + timedelta(days=7),
        isActive=True,
        createdBy=teacher_id,
        createdAt=now,
    )
    base.update(overrides)
    return Assignment(**base)


def ctx(user: User) -> UserContext:
    return UserContext(user_id=user.id, email=user.email, role=user.role)


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def users():
    repo = FakeUserRepo()
    repo.add(make_user("t1", Role.TEACHER))
    repo.add(make_user("t2", Role.TEACHER))
    repo.add(make_user("s1", Role.STUDENT))
    repo.add(make_user("s2", Role.STUDENT))
    repo.add(make_user("a1", Role.ADMIN))
    return repo


@pytest.fixture
def assignments():
    return FakeAssignmentRepo()


@pytest.fixture
def submissions():
    return FakeSubmissionRepo()


@pytest.fixture
def notifications():
    return FakeNotificationRepo()


@pytest.fixture
def teacher(users):
    return ctx(users.items["t1"])


@pytest.fixture
def other_teacher(users):
    return ctx(users.items["t2"])


@pytest.fixture
def student(users):
    return ctx(users.items["s1"])


@pytest.fixture
def student2(users):
    return ctx(users.items["s2"])


@pytest.fixture
def admin(users):
    return ctx(users.items["a1"])


@pytest.fixture
def app(users, assignments, submissions, notifications):
    # niente lifespan: i repository finti vanno direttamente in app.state
    application = create_app()
    application.state.user_repo = users
    application.state.assignment_repo = assignments
    application.state.submission_repo = submissions
    application.state.notification_repo = notifications
    return application


@pytest.fixture
def auth_headers(users):
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(users.items[user_id])}"}
    return _headers


def client_for(app, raise_app_exceptions: bool = True) -> httpx.AsyncClient:
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return httpx.AsyncClient(transport=transport, base_url="http://test")
