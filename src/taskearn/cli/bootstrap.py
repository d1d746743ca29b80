# src/taskearn/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (kv/cache/backend/wallet).
"""

from __future__ import annotations

import logging
import os

from ..config import ENV_PREFIX, get_settings
from ..core.ports import CredentialProvider
from ..core.state import AppState
from ..remote.task_source import RemoteTaskSource
from ..storage.cache_store import LocalCacheStore
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.projects import PROJECTS, with_project_ids
from ..tasks.quality import QualityMetricsTracker
from ..tasks.task_service import TaskService
from ..wallet.wallet_store import WalletStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.cache_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.wallet_db_path.parent.mkdir(parents=True, exist_ok=True)


def token_provider(settings) -> CredentialProvider:
    """
    Token accessor for the backend client.

    Re-reads TASKEARN_BACKEND_TOKEN on every call so a rotated token is picked
    up without a restart; falls back to the value captured in settings.
    """
    env_name = f"{ENV_PREFIX}_BACKEND_TOKEN"
    fallback = str(getattr(settings, "backend_token", "") or "")

    def _token() -> str:
        return (os.getenv(env_name) or fallback).strip()

    return _token


def create_initial_state(*, settings=None, source: RemoteTaskSource | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    overrides = getattr(settings, "project_ids", None) or {}
    projects = with_project_ids(overrides) if overrides else PROJECTS

    kv = SQLiteKeyValueStore(settings.cache_db_path, max_value_bytes=settings.cache_max_value_bytes)
    cache = LocalCacheStore(kv, fallback_max_entries=settings.cache_fallback_max_entries, projects=projects)

    if source is None:
        source = RemoteTaskSource(
            settings.backend_url,
            token_provider(settings),
            timeout=settings.request_timeout_seconds,
            max_attempts=settings.fetch_max_attempts,
            retry_delay=settings.fetch_retry_delay_seconds,
            projects=projects,
        )

    service = TaskService(source, cache, quality=QualityMetricsTracker(kv))

    logger.debug("Backend %s projects=%s", settings.backend_url, {str(k): v.project_id for k, v in projects.items()})

    return AppState(
        settings=settings,
        kv=kv,
        cache=cache,
        source=source,
        service=service,
        wallet=WalletStore(settings.wallet_db_path),
        user_id=getattr(settings, "user_id", "local-user"),
        projects=projects,
    )
