"""Shared fixtures: settings bound to a temp data dir, app clients and a fake KV client."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.core.config import Settings
from storefront.main import create_app

ADMIN_EMAIL = "owner@example.com"


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the KV store."""

    def __init__(self, fail: bool = False):
        self.data: Dict[str, str] = {}
        self.fail = fail

    async def ping(self) -> bool:
        if self.fail:
            raise RedisConnectionError("down")
        return True

    async def get(self, key: str) -> Optional[str]:
        if self.fail:
            raise RedisConnectionError("down")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail:
            raise RedisConnectionError("down")
        self.data[key] = value
        return True

    async def aclose(self) -> None:
        return None


def make_settings(tmp_path, **overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "STORAGE_BACKEND": "file",
        "DATA_DIR": str(tmp_path / "data"),
        "COOKIE_SECURE": False,
        "ADMIN_EMAILS": ADMIN_EMAIL,
        "SESSION_SECRET": "test-secret",
        "KV_URL": "",
        "KV_TOKEN": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def login(c: TestClient, settings: Settings) -> None:
    response = c.post(
        "/api/admin/login",
        json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200


@pytest.fixture
def admin_client(client, settings):
    login(client, settings)
    return client


TEST_KNIFE = {
    "title": "Test Knife",
    "price": 100000,
    "type": "knife",
    "category": "Kitchen",
    "steel": "D2",
    "handleMaterial": "G10",
    "bladeLengthCm": 15,
    "handleLengthCm": 10,
    "bladeStyle": "Drop Point",
    "handleStyle": "Ergonomic",
    "images": ["/a.jpg"],
}


@pytest.fixture
def knife_payload() -> Dict[str, Any]:
    return dict(TEST_KNIFE)
