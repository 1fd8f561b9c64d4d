"""API tests for the auth router (in-memory store, no database)."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
from httpx import AsyncClient

from src.dash_common.database import get_db_session
from src.dash_gateway.auth.dependencies import get_auth_service
from src.dash_gateway.user.service import AuthService
from src.main import app


class _FakeSession:
    """Stands in for AsyncSession where routers only open a transaction."""

    def __init__(self) -> None:
        self.transactions = 0

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[None]:
        self.transactions += 1
        yield


@pytest.fixture
def fake_session() -> _FakeSession:
    return _FakeSession()


@pytest.fixture
def service(user_store, auth_config, hasher) -> AuthService:
    return AuthService(user_store, auth_config, hasher)


@pytest.fixture(autouse=True)
def _overrides(fake_session: _FakeSession, service: AuthService):
    async def _session() -> AsyncIterator[_FakeSession]:
        yield fake_session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_auth_service] = lambda: service
    yield
    app.dependency_overrides.clear()


async def _register(client: AsyncClient, email: str = "alice@example.com") -> dict:
    resp = await client.post(
        "/api/v1/auth/register",
        json={"name": "Alice", "email": email, "password": "Sup3rSecret!"},
    )
    assert resp.status_code == 201
    return resp.json()


class TestRegister:
    async def test_register_success(self, client: AsyncClient, fake_session) -> None:
        body = await _register(client)
        assert body["code"] == 0
        assert body["data"]["email"] == "alice@example.com"
        assert body["data"]["name"] == "Alice"
        assert "user_id" in body["data"]
        assert "password" not in body["data"]
        assert body["request_id"].startswith("req_")
        assert fake_session.transactions == 1

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        await _register(client)
        resp = await client.post(
            "/api/v1/auth/register",
            json={"name": "Other", "email": "alice@example.com", "password": "An0therOne"},
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 1001

    async def test_register_short_password(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "123"},
        )
        assert resp.status_code == 422


class TestLogin:
    async def test_login_success(self, client: AsyncClient) -> None:
        registered = await _register(client)
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "Sup3rSecret!"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["user_id"] == registered["data"]["user_id"]
        assert resp.headers["X-Request-ID"] == body["request_id"]

    async def test_wrong_password_and_unknown_email_look_the_same(
        self, client: AsyncClient
    ) -> None:
        await _register(client)
        wrong = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "sup3rsecret!"},
        )
        unknown = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "Sup3rSecret!"},
        )
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["code"] == unknown.json()["code"] == 1003
        assert wrong.json()["message"] == unknown.json()["message"]

    async def test_malformed_stored_record_is_401(
        self, client: AsyncClient, user_store
    ) -> None:
        await user_store.add("Legacy", "legacy@example.com", "not-a-credential")
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "legacy@example.com", "password": "Sup3rSecret!"},
        )
        assert resp.status_code == 401

    @pytest.mark.parametrize("email", ["alice@example.com", "nobody@example.com"])
    async def test_lone_surrogate_password_is_a_client_error(
        self, client: AsyncClient, email: str
    ) -> None:
        await _register(client)
        raw = ("{\"email\": \"" + email + "\", \"password\": \"abcdef\\ud800\"}").encode()
        resp = await client.post(
            "/api/v1/auth/login",
            content=raw,
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code in (401, 422)
        assert resp.json()["code"] in (1000, 1003, 1006)

    async def test_overlong_password_is_422(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "x" * 129},
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 1000
        assert "password" in body["message"]
        assert "x" * 129 not in resp.text

    async def test_invalid_email_shape_is_422(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": "not-an-email", "password": "Sup3rSecret!"},
        )
        assert resp.status_code == 422


class TestChangePassword:
    async def test_change_then_login_with_new(self, client: AsyncClient, fake_session) -> None:
        await _register(client)
        resp = await client.post(
            "/api/v1/auth/password",
            json={
                "email": "alice@example.com",
                "current_password": "Sup3rSecret!",
                "new_password": "N3wSecret!",
            },
        )
        assert resp.status_code == 200
        assert fake_session.transactions == 2

        old = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "Sup3rSecret!"},
        )
        new = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "N3wSecret!"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_wrong_current_password(self, client: AsyncClient) -> None:
        await _register(client)
        resp = await client.post(
            "/api/v1/auth/password",
            json={
                "email": "alice@example.com",
                "current_password": "guess-guess",
                "new_password": "N3wSecret!",
            },
        )
        assert resp.status_code == 401


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
