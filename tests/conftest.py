# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskearn.core.state import AppState
from taskearn.storage.cache_store import LocalCacheStore
from taskearn.storage.kv_store import SQLiteKeyValueStore
from taskearn.tasks.quality import QualityMetricsTracker
from taskearn.tasks.task_service import TaskService
from taskearn.wallet.wallet_store import WalletStore

from .fakes import FakeTaskSource, InMemoryKeyValueStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskearn-test",
        log_level="DEBUG",
        backend_url="http://backend.test",
        backend_token="test-token",
        project_ids={},
        request_timeout_seconds=0.2,
        fetch_max_attempts=3,
        fetch_retry_delay_seconds=0.0,
        cache_fallback_max_entries=20,
        cache_max_value_bytes=0,
        # Paths (tmp per test run)
        data_dir=tmp_path,
        cache_db_path=tmp_path / "cache.sqlite3",
        wallet_db_path=tmp_path / "wallet.sqlite3",
        user_id="u1",
    )


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def cache(kv: InMemoryKeyValueStore) -> LocalCacheStore:
    return LocalCacheStore(kv)


@pytest.fixture()
def source() -> FakeTaskSource:
    return FakeTaskSource()


@pytest.fixture()
def service(source: FakeTaskSource, cache: LocalCacheStore, kv: InMemoryKeyValueStore) -> TaskService:
    return TaskService(source, cache, quality=QualityMetricsTracker(kv))


@pytest.fixture()
def state(settings: SimpleNamespace, source: FakeTaskSource) -> AppState:
    """
    AppState wired with a fake backend.

    NOTE: We keep real SQLite stores here (kv cache and wallet) because
    their correctness is part of what we want to test.
    """
    sqlite_kv = SQLiteKeyValueStore(settings.cache_db_path)
    cache = LocalCacheStore(sqlite_kv)
    return AppState(
        settings=settings,
        kv=sqlite_kv,
        cache=cache,
        source=source,
        service=TaskService(source, cache, quality=QualityMetricsTracker(sqlite_kv)),
        wallet=WalletStore(settings.wallet_db_path),
        user_id=settings.user_id,
    )
