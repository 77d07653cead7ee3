from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/kanban.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - JWT_SECRET_KEY: HMAC secret used to verify bearer tokens
    - JWT_ALGORITHM: signing algorithm of bearer tokens (default: HS256)
    - LOG_LEVEL: root logging level (default: INFO)
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    jwt_secret_key: str
    jwt_algorithm: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/kanban.db").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        jwt_secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
        jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256").strip(),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
