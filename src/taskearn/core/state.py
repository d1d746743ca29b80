# src/taskearn/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..remote.task_source import RemoteTaskSource
from ..storage.cache_store import LocalCacheStore
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.projects import PROJECTS
from ..tasks.task_service import TaskService
from ..wallet.wallet_store import WalletStore


@dataclass
class AppState:
    """
    Runtime state shared by connectors and command handlers.

    Stores are concrete implementations wired in cli/bootstrap.py.
    """

    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: Any

    kv: SQLiteKeyValueStore
    cache: LocalCacheStore
    source: RemoteTaskSource
    service: TaskService
    wallet: WalletStore

    user_id: str = "local-user"
    projects: Any = field(default_factory=lambda: PROJECTS)

    # Per-process: when each task was first shown (epoch seconds), for quality metrics.
    shown_at: dict[int, float] = field(default_factory=dict)
