from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from models.records import BoundaryPolicy


_DATABASE_PATH_ENV = "URBAN_DATABASE_PATH"
_TEST_DATABASE_PATH_ENV = "URBAN_TEST_DATABASE_PATH"
_TEST_MODE_ENV = "URBAN_TEST_MODE"
_SEED_ROWS_ENV = "URBAN_SEED_ROWS"
_BOUNDARY_ENV = "URBAN_WINDOW_BOUNDARY"
_CORS_ORIGINS_ENV = "URBAN_CORS_ORIGINS"
_CORS_METHODS_ENV = "URBAN_CORS_METHODS"
_CORS_HEADERS_ENV = "URBAN_CORS_HEADERS"
_HOST_ENV = "URBAN_HOST"
_PORT_ENV = "URBAN_PORT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_CORS_HEADERS = (
    "Origin",
    "Content-Type",
    "Content-Length",
    "Accept-Encoding",
    "X-CSRF-Token",
    "Authorization",
)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    database_path: str
    test_database_path: str
    test_mode: bool
    seed_rows: int
    boundary_policy: BoundaryPolicy
    cors_origins: Tuple[str, ...]
    cors_methods: Tuple[str, ...]
    cors_headers: Tuple[str, ...]
    host: str
    port: int
    log_level: str

    @property
    def active_database_path(self) -> str:
        return self.test_database_path if self.test_mode else self.database_path


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


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


def _read_list_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


def _read_boundary(default: BoundaryPolicy) -> BoundaryPolicy:
    value = os.getenv(_BOUNDARY_ENV)
    if value is None:
        return default
    try:
        return BoundaryPolicy(value.strip().lower())
    except ValueError:
        return default


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
        database_path=_read_str_env(_DATABASE_PATH_ENV, "urban.db"),
        test_database_path=_read_str_env(_TEST_DATABASE_PATH_ENV, "test.db"),
        test_mode=_read_bool_env(_TEST_MODE_ENV, False),
        seed_rows=_read_positive_int(_SEED_ROWS_ENV, 10_000),
        boundary_policy=_read_boundary(BoundaryPolicy.inclusive),
        cors_origins=_read_list_env(_CORS_ORIGINS_ENV, ("*",)),
        cors_methods=_read_list_env(_CORS_METHODS_ENV, ("GET", "POST")),
        cors_headers=_read_list_env(_CORS_HEADERS_ENV, DEFAULT_CORS_HEADERS),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_positive_int(_PORT_ENV, 8080),
        log_level=_read_log_level("INFO"),
    )
