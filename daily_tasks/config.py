"""Settings loaded from environment variables (+ optional .env).

All variables share the DAILY_TASKS_ prefix. Malformed values fall back to
their defaults rather than failing at startup.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAILY_TASKS"

DEFAULT_DATA_DIR = Path("~/.daily-tasks")
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return tuple(p.strip() for p in raw.replace(",", " ").split() if p.strip())


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default.expanduser()
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    storage_key: str
    log_level: str
    log_dir: Path
    host: str
    port: int
    cors_origins: tuple[str, ...]


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Build a Settings object from the current environment."""
    if use_dotenv:
        load_dotenv(override=False)

    data_dir = _env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR)
    return Settings(
        data_dir=data_dir,
        storage_key=_env(_k("STORAGE_KEY"), "tasks"),
        log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        log_dir=_env_path(_k("LOG_DIR"), data_dir / "logs"),
        host=_env(_k("HOST"), "127.0.0.1"),
        port=_env_int(_k("PORT"), 8000),
        cors_origins=_env_list(_k("CORS_ORIGINS"), DEFAULT_CORS_ORIGINS),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
