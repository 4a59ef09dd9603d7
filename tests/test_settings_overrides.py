from __future__ import annotations

from typing import Iterable

from datastore.reading_store import build_default_store
from services.readings import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_defaults_apply_when_environment_is_blank(monkeypatch) -> None:
    for name in ("DATABASE_URL", "DB_POOL_SIZE", "DB_POOL_TIMEOUT", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.setenv(name, "  ")
    monkeypatch.setenv("SAMPLE_DATA_DEFAULT_COUNT", "-4")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.database_url == "sqlite:///./tmp/distances.db"
        assert settings.pool_size == 10
        assert settings.pool_timeout == 30.0
        assert settings.cors_origins == ("*",)
        assert settings.sample_default_count == 100
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    database_path = tmp_path / "data" / "distances.db"

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{database_path}")
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "2.5")
    monkeypatch.setenv("CORS_ORIGINS", "https://distance.example.com, https://admin.example.com")
    monkeypatch.setenv("SAMPLE_DATA_DEFAULT_COUNT", "25")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    caches = (get_settings, build_default_store, build_default_service)
    _clear_caches(caches)

    settings = get_settings()
    service = build_default_service()

    try:
        assert settings.pool_timeout == 2.5
        assert settings.cors_origins == ("https://distance.example.com", "https://admin.example.com")
        assert settings.sample_default_count == 25
        assert settings.log_level == "DEBUG"
        assert service.store is build_default_store()
        assert service.store.engine.url.database == str(database_path)
        assert service.store.engine.pool.size() == 3
        assert database_path.parent.is_dir()
    finally:
        service.shutdown()
        _clear_caches(caches)
