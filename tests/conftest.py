"""
Shared fixtures.

Settings are read once at import time, so the environment is prepared here
before anything from `filmunity` is imported.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="filmunity-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["APP_ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["SMTP_HOST"] = ""
os.environ["PEXELS_API_KEY"] = "test-pexels-key"
os.environ["FRONTEND_URL"] = "http://frontend.test"

import httpx
import pytest
import pytest_asyncio

PASSWORD = "Secret123!"


@pytest_asyncio.fixture
async def database():
    """Fresh tables for each test."""
    from filmunity.db.session import drop_db, engine, init_db

    await init_db()
    yield
    await drop_db()
    await engine.dispose()


@pytest_asyncio.fixture
async def db(database):
    """A session for calling services directly."""
    from filmunity.db.session import AsyncSessionLocal

    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def login_guard():
    from filmunity.core.login_guard import LoginGuard

    return LoginGuard(max_attempts=5, lockout_seconds=15 * 60)


@pytest_asyncio.fixture
async def client(database, login_guard):
    """HTTP client bound to the app, with its own login guard."""
    from main import app
    from filmunity.core.login_guard import get_login_guard

    app.dependency_overrides[get_login_guard] = lambda: login_guard
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def signup_and_login(client):
    """Register an account, log in (cookie lands in the client) and return the user id."""

    async def _signup_and_login(
        email: str = "alice@example.com",
        password: str = PASSWORD,
        first_name: str = "Alice",
    ) -> str:
        response = await client.post(
            "/api/auth/register",
            json={
                "firstName": first_name,
                "lastName": "Tester",
                "age": 30,
                "email": email,
                "password": password,
            },
        )
        assert response.status_code == 201, response.text

        response = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["userId"]

    return _signup_and_login


@pytest_asyncio.fixture
async def make_user(db):
    """Insert a user straight into the database and return it."""
    from filmunity.models.user import User
    from filmunity.services.auth_service import AuthService

    hashed = AuthService.hash_password(PASSWORD)

    async def _make_user(email: str, first_name: str = "Test") -> User:
        user = User(
            email=email,
            hashed_password=hashed,
            first_name=first_name,
            last_name="User",
            age=25,
        )
        db.add(user)
        await db.flush()
        return user

    return _make_user
