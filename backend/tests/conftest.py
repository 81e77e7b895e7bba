"""
Shared fixtures: in-memory SQLite database, users, a recording dispatcher and
an API client wired to both.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DISCORD_BOT_TOKEN"] = ""

from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import team_planner.models  # noqa: F401
from team_planner.api.deps import get_dispatcher
from team_planner.core.database import Base, get_db
from team_planner.core.security import create_access_token
from team_planner.main import app
from team_planner.models.schedule_entry import LocationType, ScheduleEntry
from team_planner.models.user import User, UserRole

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SWAP_DAY = "2025-03-10"


class FakeNotifier:
    """Stands in for the chat bridge used by the test-notification route."""

    def __init__(self, ready: bool = True, deliver: bool = True):
        self.ready = ready
        self.deliver = deliver
        self.sent: List[Tuple[str, str]] = []

    @property
    def is_ready(self) -> bool:
        return self.ready

    async def send_test_notification(self, discord_id: str, message: str) -> bool:
        self.sent.append((discord_id, message))
        return self.deliver


class RecordingDispatcher:
    """Collects enqueued external notifications instead of delivering them."""

    def __init__(self):
        self.notifier = FakeNotifier()
        self.jobs: List[tuple] = []

    def enqueue_swap_request(self, swap, requester, target) -> bool:
        self.jobs.append(("swap_request", swap, requester, target))
        return True

    def enqueue_swap_response(self, swap, action) -> bool:
        self.jobs.append(("swap_response", swap, action))
        return True

    def enqueue_schedule_update(self, user, changes) -> bool:
        self.jobs.append(("schedule_update", user, changes))
        return True

    def kinds(self) -> List[str]:
        return [job[0] for job in self.jobs]


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db, name: str, email: str, role: UserRole = UserRole.USER) -> User:
    user = User(name=name, email=email, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_entry(db, user: User, day: str, location: LocationType, reason=None, created_by: User = None) -> ScheduleEntry:
    entry = ScheduleEntry(
        user_id=user.id,
        date=day,
        location=location,
        reason=reason,
        created_by=(created_by or user).id,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@pytest.fixture
def alice(db) -> User:
    return make_user(db, "Alice", "alice@example.com")


@pytest.fixture
def bob(db) -> User:
    return make_user(db, "Bob", "bob@example.com")


@pytest.fixture
def carol(db) -> User:
    return make_user(db, "Carol", "carol@example.com")


@pytest.fixture
def admin(db) -> User:
    return make_user(db, "Admin", "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def client(db, dispatcher):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
