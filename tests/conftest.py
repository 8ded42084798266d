"""
Pytest fixtures for Taskboard tests.
"""

import os

# Must be set before anything imports taskboard.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import uuid
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskboard.api.deps import get_identity_service, get_token_manager
from taskboard.kernel.identity.errors import DuplicateEmailError
from taskboard.kernel.identity.identity_service import IdentityService
from taskboard.kernel.identity.password import PasswordHasher
from taskboard.kernel.identity.records import NewUser, UserRecord
from taskboard.kernel.identity.tokens import JWTManager


class InMemoryUserStore:
    """UserStore fake that enforces email uniqueness like the real table."""

    def __init__(self):
        self.records: dict[str, UserRecord] = {}
        self.insert_calls = 0

    async def insert_one(self, record: NewUser) -> str:
        self.insert_calls += 1
        if any(r.email == record.email for r in self.records.values()):
            raise DuplicateEmailError(record.email)
        user_id = str(uuid.uuid4())
        self.records[user_id] = UserRecord(id=user_id, **record.model_dump())
        return user_id

    async def find_one(self, email: str) -> Optional[UserRecord]:
        for record in self.records.values():
            if record.email == email:
                return record
        return None


@pytest.fixture
def hasher() -> PasswordHasher:
    """Cheap hasher so tests stay fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def identity_service(
    user_store: InMemoryUserStore,
    hasher: PasswordHasher,
    jwt_manager: JWTManager,
) -> IdentityService:
    return IdentityService(
        store=user_store,
        hasher=hasher,
        token_issuer=jwt_manager,
        store_timeout=1.0,
    )


@pytest_asyncio.fixture
async def client(
    identity_service: IdentityService,
    jwt_manager: JWTManager,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, wired to the in-memory store."""
    from taskboard.main import app

    app.dependency_overrides[get_identity_service] = lambda: identity_service
    app.dependency_overrides[get_token_manager] = lambda: jwt_manager

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sign_up_payload() -> dict:
    return {"email": "a@x.com", "password": "pw123", "name": "A"}
