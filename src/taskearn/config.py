# src/taskearn/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the backend token may be empty until used).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKEARN"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_project_ids(name: str) -> dict[str, int]:
    """Parse "TEXT=3,IMAGE=4" style overrides; malformed pairs are ignored."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return {}
    out: dict[str, int] = {}
    for part in raw.replace(";", ",").split(","):
        key, sep, val = part.partition("=")
        if not sep or not key.strip():
            continue
        try:
            out[key.strip()] = int(val.strip())
        except ValueError:
            continue
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Backend ----
    backend_url: str
    backend_token: str
    project_ids: dict[str, int] = field(default_factory=dict)

    # ---- Remote reads ----
    request_timeout_seconds: float = 5.0
    fetch_max_attempts: int = 3
    fetch_retry_delay_seconds: float = 1.0

    # ---- Cache ----
    cache_fallback_max_entries: int = 20
    cache_max_value_bytes: int = 0

    # ---- Local data paths (ignored by git) ----
    data_dir: Path = Path(".local/taskearn")
    cache_db_path: Path = Path(".local/taskearn/cache.sqlite3")
    wallet_db_path: Path = Path(".local/taskearn/wallet.sqlite3")

    # ---- Wallet ----
    user_id: str = "local-user"

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "taskearn") or "taskearn"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        backend_url = (_env(_k("BACKEND_URL"), "http://localhost:8080").strip() or "http://localhost:8080").rstrip("/")
        backend_token = _env(_k("BACKEND_TOKEN"), "").strip()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskearn"))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend_url=backend_url,
            backend_token=backend_token,
            project_ids=_env_project_ids(_k("PROJECT_IDS")),
            request_timeout_seconds=_env_float(_k("REQUEST_TIMEOUT_SECONDS"), 5.0),
            fetch_max_attempts=max(1, _env_int(_k("FETCH_MAX_ATTEMPTS"), 3)),
            fetch_retry_delay_seconds=max(0.0, _env_float(_k("FETCH_RETRY_DELAY_SECONDS"), 1.0)),
            cache_fallback_max_entries=max(1, _env_int(_k("CACHE_FALLBACK_MAX_ENTRIES"), 20)),
            cache_max_value_bytes=max(0, _env_int(_k("CACHE_MAX_VALUE_BYTES"), 0)),
            data_dir=data_dir,
            cache_db_path=_env_path(_k("CACHE_DB_PATH"), data_dir / "cache.sqlite3"),
            wallet_db_path=_env_path(_k("WALLET_DB_PATH"), data_dir / "wallet.sqlite3"),
            user_id=_env(_k("USER_ID"), "local-user").strip() or "local-user",
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings; .env is loaded on first call (existing env wins)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
