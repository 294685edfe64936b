import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from staff_portal.auth.instance import AuthConfig
from staff_portal.core import db as db_module
from staff_portal.core.portal import Core, CoreOptions
from staff_portal.core.security import hash_password
from staff_portal.models.user import User
from staff_portal.modules.ping import create_module as ping_module


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

ADMIN_KEY = "test-admin-key"
ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


class FakeRedis:
    """In-memory stand-in for the Redis set commands used by the token set."""

    def __init__(self):
        self.sets: dict[str, set[str]] = {}
        self.closed = False

    async def ping(self):
        return True

    async def sadd(self, name, *values):
        members = self.sets.setdefault(name, set())
        before = len(members)
        members.update(values)
        return len(members) - before

    async def sismember(self, name, value):
        return int(value in self.sets.get(name, set()))

    async def srem(self, name, *values):
        members = self.sets.get(name, set())
        removed = len([v for v in values if v in members])
        members.difference_update(values)
        return removed

    async def aclose(self):
        self.closed = True


class RecordingLogger:
    """Log function that keeps every (level, message) pair."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def __call__(self, level: str, message: str) -> None:
        self.records.append((level, message))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m in self.records if lvl == level]


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def log():
    return RecordingLogger()


@pytest.fixture
def auth_config():
    return AuthConfig(
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        access_token_expire_minutes=5,
        token_set_name="tokens",
    )


@pytest.fixture
def make_core(fake_redis, log, auth_config):
    """
    Factory fixture building a Core wired to the fake key/value store.
    Keyword arguments override CoreOptions fields.
    """

    def _make(**overrides) -> Core:
        options = {
            "auth": auth_config,
            "modules": [ping_module],
            "logger": log,
            "kv_client": fake_redis,
            "admin_key": ADMIN_KEY,
        }
        options.update(overrides)
        return Core(CoreOptions(**options))

    return _make


@pytest.fixture
def core(make_core):
    return make_core()


@pytest_asyncio.fixture
async def db():
    """Fresh user collection for the duration of one test."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client_factory(db):
    """
    Factory fixture returning HTTPX AsyncClients bound to a given app.
    Lifespan is not run; the test database is already initialized.
    """
    clients: list[AsyncClient] = []

    async def _make(app) -> AsyncClient:
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(c)
        return c

    yield _make
    for c in clients:
        await c.aclose()


@pytest_asyncio.fixture
async def client(core, client_factory):
    """HTTPX AsyncClient bound to the default Core's app."""
    return await client_factory(core.app)


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23", active: bool = True) -> tuple[User, str]:
        name = f"user_{uuid.uuid4().hex[:6]}"
        user = await User.create(
            username=name,
            email=f"{name}@example.com",
            hashed_password=hash_password(password),
            active=active,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def login_tokens(client):
    """
    Helper fixture to obtain a token pair via the login endpoint.
    """

    async def _login(login: str, password: str) -> dict[str, str]:
        resp = await client.post("/auth/login", json={"login": login, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _login
