"""Shared test fixtures."""

import uuid
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from src.dash_gateway.auth.config import AuthConfig
from src.dash_gateway.auth.password import CredentialHasher
from src.dash_gateway.user.store import UserCredential
from src.main import app

# Lowest accepted round count: keeps the suite fast, same code path as production
FAST_ITERATIONS = 1_000


class InMemoryUserStore:
    """UserStore backed by a dict keyed on email."""

    def __init__(self) -> None:
        self.users: dict[str, UserCredential] = {}

    async def find_by_email(self, email: str) -> UserCredential | None:
        return self.users.get(email)

    async def add(self, name: str, email: str, password: str) -> UserCredential:
        user = UserCredential(
            user_id=str(uuid.uuid4()),
            name=name,
            email=email,
            password=password,
            created_at=datetime.now(timezone.utc),
        )
        self.users[email] = user
        return user

    async def replace_password(self, user_id: str, password: str) -> None:
        for email, user in self.users.items():
            if user.user_id == user_id:
                self.users[email] = UserCredential(
                    user_id=user.user_id,
                    name=user.name,
                    email=user.email,
                    password=password,
                    created_at=user.created_at,
                )
                return


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(iterations=FAST_ITERATIONS)


@pytest.fixture
def hasher(auth_config: AuthConfig) -> CredentialHasher:
    return auth_config.build_hasher()


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
