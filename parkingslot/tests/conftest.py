from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from datetime import UTC, datetime

# Environment must be in place before any parkingslot module loads its config
_TMP_DIR = tempfile.mkdtemp(prefix="parkingslot-tests-")
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-signing-key-0123456789abcdef0123456789"
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["SENDGRID_API_KEY"] = "SG.test-key"
os.environ["FRONTEND_URL"] = "http://localhost:8080"
os.environ.pop("ADMIN_USERNAME", None)

import pytest  # noqa: E402

from parkingslot.application.interfaces import EmailMessage  # noqa: E402
from parkingslot.application.services.token_service import JwtTokenService  # noqa: E402
from parkingslot.domain.pagination import (  # noqa: E402
    PageRequest,
    PageResult,
    SortColumn,
    SortMapping,
    paginate,
)
from parkingslot.domain.users.entities import Role, User  # noqa: E402
from parkingslot.domain.users.repositories import PasswordHasher, UserRepository  # noqa: E402
from parkingslot.shared.config import AuthConfig  # noqa: E402
from parkingslot.shared.errors.base import NotFoundError  # noqa: E402

FAKE_USER_SORTING = SortMapping(
    name="users",
    columns={
        "firstName": SortColumn.of("first_name"),
        "lastName": SortColumn.of("last_name"),
        "email": SortColumn.of("email"),
        "username": SortColumn.of("username"),
    },
    default_key="username",
)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email.lower() == email.lower()), None)

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def update(self, user: User) -> User:
        if user.id not in self._users:
            raise NotFoundError("user", user.id)
        self._users[user.id] = user
        return user

    def update_password(self, user_id: str, password_hash: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        updated = replace(user, password_hash=password_hash, token_version=user.token_version + 1)
        self._users[user_id] = updated
        return updated

    def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def list_page(self, request: PageRequest) -> PageResult[User]:
        ordered = FAKE_USER_SORTING.sort(self._users.values(), request.order_by)
        return paginate(ordered, request)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class RecordingEmailSender:
    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> None:
        self.sent.append(message)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_user(
    username: str = "alice",
    *,
    password: str = "Secret123",
    email: str | None = None,
    role: Role = Role.USER,
    user_id: str | None = None,
) -> User:
    return User(
        id=user_id or f"id-{username}",
        first_name=username.capitalize(),
        last_name="Tan",
        username=username,
        email=email or f"{username}@example.com",
        phone_number="+65 6123 4567",
        password_hash=f"hashed:{password}",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        role=role,
    )


@pytest.fixture()
def auth_settings() -> AuthConfig:
    return AuthConfig(SECRET_KEY="unit-test-signing-key-0123456789abcdef")


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 6, 1, 12, 0, tzinfo=UTC))


@pytest.fixture()
def token_service(auth_settings: AuthConfig, clock: FrozenClock) -> JwtTokenService:
    return JwtTokenService(auth_settings, clock=clock)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def mailer() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def user_factory():
    return make_user


@pytest.fixture(scope="session", autouse=True)
def database_schema():
    from parkingslot.infrastructure.db import init_db

    init_db()
    yield
