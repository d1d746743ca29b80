# src/taskearn/tasks/quality.py

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass

from ..core.ports import KeyValueStore
from .projects import QUALITY_METRICS_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QualityMetrics:
    completionTime: int  # ms; key name matches the persisted record
    accuracy: float = 1.0
    consistency: float = 1.0


class QualityMetricsTracker:
    """
    Per-task completion metrics, stored as one JSON object under TASK_QUALITY_METRICS.

    Diagnostic data only: storage failures are logged and never raised.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def _load_all(self) -> dict[str, dict]:
        raw = self._kv.get(QUALITY_METRICS_KEY)
        if not raw:
            return {}
        try:
            val = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Quality metrics record is not valid JSON; starting fresh")
            return {}
        return val if isinstance(val, dict) else {}

    def track(self, task_id: int, started_at: float, now: float | None = None) -> QualityMetrics | None:
        """started_at / now are epoch seconds (time.time())."""
        end = time.time() if now is None else now
        metrics = QualityMetrics(completionTime=max(0, int(round((end - started_at) * 1000))))
        try:
            record = self._load_all()
            record[str(task_id)] = asdict(metrics)
            self._kv.set(QUALITY_METRICS_KEY, json.dumps(record))
        except Exception:
            logger.exception("Failed to track quality metrics for task %s", task_id)
            return None
        logger.debug("Quality metrics task=%s completion_ms=%s", task_id, metrics.completionTime)
        return metrics

    def get(self, task_id: int) -> QualityMetrics | None:
        try:
            entry = self._load_all().get(str(task_id))
        except Exception:
            logger.exception("Failed to read quality metrics for task %s", task_id)
            return None
        if not isinstance(entry, dict):
            return None
        return QualityMetrics(
            completionTime=int(entry.get("completionTime", 0)),
            accuracy=float(entry.get("accuracy", 1.0)),
            consistency=float(entry.get("consistency", 1.0)),
        )
