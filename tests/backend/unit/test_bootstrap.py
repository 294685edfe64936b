"""
Unit tests for core.bootstrap module.
Tests seeding of the first user account.
"""
import pytest

from staff_portal.core.bootstrap import ensure_default_user
from staff_portal.core.security import verify_password
from staff_portal.models.user import User


pytestmark = pytest.mark.asyncio


async def test_creates_active_user_when_collection_is_empty(db, log, monkeypatch):
    monkeypatch.setenv("DEFAULT_USER_PASSWORD", "Seed#123")
    monkeypatch.setenv("DEFAULT_USER_NAME", "root")
    monkeypatch.setenv("DEFAULT_USER_EMAIL", "root@example.com")

    user = await ensure_default_user(log)

    assert user is not None
    stored = await User.get(username="root")
    assert stored.active is True
    assert stored.email == "root@example.com"
    assert verify_password("Seed#123", stored.hashed_password)
    assert "[bootstrap] Created default user" in log.messages("warn")[0]


async def test_skips_without_password(db, log, monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_PASSWORD", raising=False)

    assert await ensure_default_user(log) is None
    assert await User.all().count() == 0
    assert "DEFAULT_USER_PASSWORD not set" in log.messages("warn")[0]


async def test_skips_when_users_exist(create_user, log, monkeypatch):
    monkeypatch.setenv("DEFAULT_USER_PASSWORD", "Seed#123")
    await create_user()

    assert await ensure_default_user(log) is None
    assert await User.all().count() == 1
    assert log.records == []
