# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from taskearn.cli.bootstrap import create_initial_state, token_provider
from taskearn.config import Settings
from taskearn.tasks.projects import PROJECTS, with_project_ids
from taskearn.tasks.task_models import ProjectType


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in [k for k in os.environ if k.startswith("TASKEARN_")]:
        monkeypatch.delenv(name)

    s = Settings.from_env()
    assert s.backend_url == "http://localhost:8080"
    assert s.request_timeout_seconds == 5.0
    assert s.fetch_max_attempts == 3
    assert s.fetch_retry_delay_seconds == 1.0
    assert s.cache_fallback_max_entries == 20
    assert s.cache_db_path == Path(".local/taskearn") / "cache.sqlite3"
    assert s.project_ids == {}


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKEARN_BACKEND_URL", "http://ls.local:9090/")
    monkeypatch.setenv("TASKEARN_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKEARN_FETCH_MAX_ATTEMPTS", "not-a-number")
    monkeypatch.setenv("TASKEARN_PROJECT_IDS", "image=14, GEO=17, broken")

    s = Settings.from_env()
    assert s.backend_url == "http://ls.local:9090"
    assert s.fetch_max_attempts == 3
    assert s.wallet_db_path == tmp_path / "wallet.sqlite3"
    assert s.project_ids == {"image": 14, "GEO": 17}

    table = with_project_ids(s.project_ids)
    assert table[ProjectType.IMAGE_CLASSIFICATION].project_id == 14
    assert table[ProjectType.GEOSPATIAL_LABELING].project_id == 17
    assert PROJECTS[ProjectType.IMAGE_CLASSIFICATION].project_id == 4


def test_token_provider_rereads_env(monkeypatch: pytest.MonkeyPatch, settings) -> None:
    monkeypatch.delenv("TASKEARN_BACKEND_TOKEN", raising=False)
    provider = token_provider(settings)
    assert provider() == "test-token"

    monkeypatch.setenv("TASKEARN_BACKEND_TOKEN", "rotated")
    assert provider() == "rotated"


def test_create_initial_state_wires_settings(settings, source) -> None:
    state = create_initial_state(settings=settings, source=source)
    assert state.projects is PROJECTS
    assert state.user_id == "u1"
    assert state.source is source
    assert settings.cache_db_path.exists()

    settings.project_ids = {"text": 31}
    overridden = create_initial_state(settings=settings, source=source)
    assert overridden.projects[ProjectType.TEXT_SENTIMENT].project_id == 31


def test_app_state_defaults_to_builtin_projects(state) -> None:
    assert state.projects is PROJECTS
    assert state.shown_at == {}
