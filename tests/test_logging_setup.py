# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskearn.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    libs = {name: logging.getLogger(name).level for name in ("httpx", "httpcore")}
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    for name, lvl in libs.items():
        logging.getLogger(name).setLevel(lvl)
    logging.captureWarnings(False)


def test_console_filter_routes_by_logger_name() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("taskearn.tasks.task_service", logging.INFO))
    assert not f.filter(_record("taskearn.remote.task_source", logging.INFO))
    assert f.filter(_record("taskearn.remote.task_source", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logger) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    assert log_file == tmp_path / "logs" / "taskearn.log"
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("taskearn.remote.task_source").info("Fetched %s tasks", 3)
    for h in logging.getLogger().handlers:
        h.flush()

    assert "Fetched 3 tasks" in log_file.read_text(encoding="utf-8")
