from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'mongo'
    - MONGODB_URL: MongoDB connection string. Default 'mongodb://localhost:27017'
    - MONGODB_DATABASE: database holding the todo collection. Default 'todo'
    - MONGODB_COLLECTION: collection name. Default 'todos'
    - MONGODB_TIMEOUT_MS: server selection timeout in milliseconds. Default 5000
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: logging level name. Default 'INFO'
    """

    persistence_backend: str = "memory"
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "todo"
    mongodb_collection: str = "todos"
    mongodb_timeout_ms: int = 5000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


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
    if backend not in {"memory", "mongo"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        mongodb_url=_get_env("MONGODB_URL", "mongodb://localhost:27017").strip(),
        mongodb_database=_get_env("MONGODB_DATABASE", "todo").strip(),
        mongodb_collection=_get_env("MONGODB_COLLECTION", "todos").strip(),
        mongodb_timeout_ms=_parse_int(_get_env("MONGODB_TIMEOUT_MS", "5000"), 5000),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
