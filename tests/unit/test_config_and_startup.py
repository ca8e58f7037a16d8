import asyncio

import pytest
from fastapi.testclient import TestClient

from storefront.core import config
from storefront.core.versioning import resolve_version
from storefront.db.errors import StorageConfigError
from storefront.main import create_app

from conftest import make_settings


def test_csv_settings_are_split_and_trimmed(tmp_path):
    settings = make_settings(tmp_path, ADMIN_EMAILS="A@x.id, b@x.id ,", ALLOWED_ORIGINS="https://a.id,,https://b.id")

    assert settings.admin_emails == ["a@x.id", "b@x.id"]
    assert settings.allowed_origins == ["https://a.id", "https://b.id"]


def test_oauth_secret_falls_back_to_session_secret(tmp_path):
    assert make_settings(tmp_path, OAUTH_SECRET="").oauth_secret == "test-secret"
    assert make_settings(tmp_path, OAUTH_SECRET="other").oauth_secret == "other"


def test_get_settings_reads_environment(monkeypatch):
    config.get_settings.cache_clear()
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("KV_KEY_PREFIX", "shop")
    try:
        settings = config.get_settings()
        assert settings.STORAGE_BACKEND == "memory"
        assert settings.KV_KEY_PREFIX == "shop"
        assert config.get_settings() is settings
    finally:
        config.get_settings.cache_clear()


@pytest.mark.parametrize("header, expected", [(None, "v2"), ("1", "v1"), ("v1", "v1"), ("2", "v2"), ("v9", "v2")])
def test_resolve_version(header, expected):
    assert asyncio.run(resolve_version(header)) == expected


def test_explicit_kv_without_url_fails_at_startup(tmp_path):
    settings = make_settings(tmp_path, STORAGE_BACKEND="remote-kv")

    with pytest.raises(StorageConfigError):
        with TestClient(create_app(settings)):
            pass


def test_auto_without_kv_url_uses_disk(tmp_path):
    settings = make_settings(tmp_path, STORAGE_BACKEND="auto")

    with TestClient(create_app(settings)) as c:
        assert c.get("/api/admin/db-status").json()["databaseInfo"]["storageType"] == "file"
