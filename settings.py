from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple


_DATABASE_URL_ENV = "DATABASE_URL"
_POOL_SIZE_ENV = "DB_POOL_SIZE"
_POOL_TIMEOUT_ENV = "DB_POOL_TIMEOUT"
_CORS_ORIGINS_ENV = "CORS_ORIGINS"
_SAMPLE_COUNT_ENV = "SAMPLE_DATA_DEFAULT_COUNT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    database_url: str
    pool_size: int
    pool_timeout: float
    cors_origins: Tuple[str, ...]
    sample_default_count: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=_read_str_env(_DATABASE_URL_ENV, "sqlite:///./tmp/distances.db"),
        pool_size=_read_positive_int(_POOL_SIZE_ENV, 10),
        pool_timeout=_read_positive_float(_POOL_TIMEOUT_ENV, 30.0),
        cors_origins=_read_origins(("*",)),
        sample_default_count=_read_positive_int(_SAMPLE_COUNT_ENV, 100),
        log_level=_read_log_level("INFO"),
    )
