# src/taskearn/tasks/maintenance.py

"""
One-off backend data repairs.

Not part of the read/submit path: an operator runs these (e.g. /fixgeo in
the console) to overwrite task data on the backend.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.errors import SubmissionError

logger = logging.getLogger(__name__)


class TaskDataWriter(Protocol):
    async def update_task_data(self, task_id: int, data: Mapping[str, Any]) -> dict[str, Any]: ...


@dataclass(frozen=True, slots=True)
class TaskDataFix:
    task_id: int
    data: dict[str, Any]


_GEO_QUESTION = "What is the most prominent feature in this map?"
_GEO_OPTIONS = [
    {"id": "building", "text": "Buildings", "value": "building"},
    {"id": "road", "text": "Roads", "value": "road"},
    {"id": "water", "text": "Water", "value": "water"},
    {"id": "vegetation", "text": "Vegetation", "value": "vegetation"},
]


def _geo_fix(task_id: int, image: str, location_name: str) -> TaskDataFix:
    return TaskDataFix(
        task_id=task_id,
        data={
            "image": image,
            "location_name": location_name,
            "question": _GEO_QUESTION,
            "options": [dict(o) for o in _GEO_OPTIONS],
        },
    )


GEOSPATIAL_FIXES: tuple[TaskDataFix, ...] = (
    _geo_fix(
        28,
        "https://images.unsplash.com/photo-1500382017468-9049fed747ef?auto=format&fit=crop&w=1024&q=80",
        "Agricultural Land",
    ),
    _geo_fix(
        29,
        "https://images.unsplash.com/photo-1454496522488-7a8e488e8606?auto=format&fit=crop&w=1024&q=80",
        "Mountain Region",
    ),
    _geo_fix(
        30,
        "https://images.unsplash.com/photo-1547471080-7cc2caa01a7e?auto=format&fit=crop&w=1024&q=80",
        "Desert Region",
    ),
)


async def apply_task_data_fixes(source: TaskDataWriter, fixes: Iterable[TaskDataFix]) -> int:
    """PATCH each fix in order; returns how many succeeded. Failures are logged and skipped."""
    ok = 0
    total = 0
    for fix in fixes:
        total += 1
        try:
            await source.update_task_data(fix.task_id, fix.data)
        except SubmissionError as e:
            logger.error("Failed to update task %s: %s", fix.task_id, e)
            continue
        ok += 1
        logger.info("Updated task %s", fix.task_id)

    logger.info("Task data fixes applied: %s/%s", ok, total)
    return ok
