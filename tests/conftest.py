"""
Shared fixtures: an in-memory SQLite database built from the application
models, a recording event sink and a fully wired UserRepository.
"""

import os

os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_LOCALE", "en")

from typing import Any, List  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from accounts.api.v1.repositories import (  # noqa: E402
    NotificationRepository,
    RoleRepository,
    SocialProfileRepository,
    SubscriptionRepository,
    UserRepository,
    UserRolesRepository,
)
from accounts.core.repositories import FileEntryRepository, PermanentlyDeleteEntries  # noqa: E402
from accounts.db import DatabaseManager  # noqa: E402


class RecordingEventSink:
    def __init__(self):
        self.events: List[Any] = []

    async def publish(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


class RecordingBillingGateway:
    def __init__(self):
        self.cancelled = []

    async def cancel(self, subscription) -> None:
        self.cancelled.append(subscription.gateway_id)


@pytest.fixture
async def database():
    manager = DatabaseManager(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    await manager.create_all()
    yield manager
    await manager.disconnect()


@pytest.fixture
async def db(database):
    async with database.async_session_factory() as session:
        yield session


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def billing_gateway() -> RecordingBillingGateway:
    return RecordingBillingGateway()


@pytest.fixture
def role_repository() -> RoleRepository:
    return RoleRepository()


@pytest.fixture
def file_repository() -> FileEntryRepository:
    return FileEntryRepository()


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def user_repository(role_repository, file_repository, event_sink, billing_gateway, upload_dir) -> UserRepository:
    return UserRepository(
        role_repository=role_repository,
        user_roles_repository=UserRolesRepository(),
        social_profile_repository=SocialProfileRepository(),
        notification_repository=NotificationRepository(),
        subscription_repository=SubscriptionRepository({"stripe": billing_gateway}),
        file_repository=file_repository,
        delete_entries=PermanentlyDeleteEntries(file_repository, upload_dir=str(upload_dir)),
        events=event_sink,
    )


@pytest.fixture
async def default_role(db, role_repository):
    return await role_repository.create(db, {"name": "users", "default": True, "permissions": {"files.view": True}})


@pytest.fixture
async def admin_role(db, role_repository):
    return await role_repository.create(db, {"name": "admin", "permissions": {"users.delete": True}})


@pytest.fixture
async def editor_role(db, role_repository):
    return await role_repository.create(db, {"name": "editor"})
