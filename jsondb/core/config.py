"""
Configuration helpers for jsondb.

Exposes a frozen Settings object read from environment variables so that the
store and the scripts do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_path: Path
    json_indent: Optional[int]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    indent = _int(os.getenv("JSONDB_INDENT", "0"), 0)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_path=Path(os.getenv("JSONDB_PATH") or "database.json").expanduser(),
        json_indent=indent if indent > 0 else None,
        log_level=(os.getenv("JSONDB_LOG_LEVEL") or "WARNING").upper(),
    )
