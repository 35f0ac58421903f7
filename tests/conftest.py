"""Shared fixtures: in-memory store, fake vision client and an API client."""

from __future__ import annotations

import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest

from core.store import StoreError
from core.vision import ScanError


class FakeStore:
    """Dict-backed store for one user; names in ``fail_on`` raise StoreError on write."""

    def __init__(self, records=None, fail_on=()):
        self.records = dict(records or {})
        self.fail_on = set(fail_on)
        self.calls = []

    async def list_records(self, user_id):
        self.calls.append(("list", None))
        return list(self.records.items())

    async def get_record(self, user_id, name):
        self.calls.append(("get", name))
        return self.records.get(name)

    async def set_record(self, user_id, name, quantity):
        self.calls.append(("set", name))
        if name in self.fail_on:
            raise StoreError(f"write refused for {name}")
        self.records[name] = quantity

    async def delete_record(self, user_id, name):
        self.calls.append(("delete", name))
        if name in self.fail_on:
            raise StoreError(f"delete refused for {name}")
        self.records.pop(name, None)


class FakeVision:
    def __init__(self, result=None, error=None):
        self.result = result or {}
        self.error = error
        self.calls = []

    async def scan(self, image, content_type=None, filename=None):
        self.calls.append((len(image), content_type, filename))
        if self.error:
            raise ScanError(self.error)
        return dict(self.result)


@pytest.fixture
def user_id():
    return uuid.UUID("00000000-0000-0000-0000-000000000001")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def api(store, vision, user_id):
    from fastapi.testclient import TestClient

    from core.dependencies import get_current_user, get_inventory_store
    from core.session import CurrentUser, SessionRegistry
    from core.vision import get_vision_client
    from main import app

    app.state.sessions = SessionRegistry(items_per_page=2)
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id=user_id, email="user@example.com")
    app.dependency_overrides[get_inventory_store] = lambda: store
    app.dependency_overrides[get_vision_client] = lambda: vision
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
