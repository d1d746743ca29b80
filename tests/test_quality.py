# tests/test_quality.py

from __future__ import annotations

import json

from taskearn.tasks.quality import QualityMetrics, QualityMetricsTracker

from .fakes import InMemoryKeyValueStore


def test_track_stores_completion_time_in_ms() -> None:
    kv = InMemoryKeyValueStore()
    tracker = QualityMetricsTracker(kv)

    m = tracker.track(7, started_at=100.0, now=102.5)

    assert m == QualityMetrics(completionTime=2500, accuracy=1.0, consistency=1.0)
    assert json.loads(kv.data["TASK_QUALITY_METRICS"]) == {
        "7": {"completionTime": 2500, "accuracy": 1.0, "consistency": 1.0}
    }
    assert tracker.get(7) == m
    assert tracker.get(8) is None


def test_track_failure_is_logged_not_raised() -> None:
    kv = InMemoryKeyValueStore(max_value_bytes=5)
    tracker = QualityMetricsTracker(kv)
    assert tracker.track(1, started_at=0.0, now=1.0) is None
    assert tracker.get(1) is None
