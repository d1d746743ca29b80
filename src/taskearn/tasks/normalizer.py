# src/taskearn/tasks/normalizer.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.errors import MalformedTaskError
from .task_models import ProjectType, Task

logger = logging.getLogger(__name__)

KNOWN_DATA_FIELDS: tuple[str, ...] = (
    "text",
    "image",
    "audio",
    "question",
    "title",
    "description",
    "link",
    "str",
    "options",
    "location_name",
    "map_image",
)


def _coerce_id(raw_id: Any) -> int:
    if isinstance(raw_id, bool):
        raise MalformedTaskError(f"Task id must be an integer, got {raw_id!r}")
    if isinstance(raw_id, int):
        return raw_id
    if isinstance(raw_id, str) and raw_id.strip().lstrip("-").isdigit():
        return int(raw_id.strip())
    raise MalformedTaskError(f"Task id must be an integer, got {raw_id!r}")


def _project_data(raw_data: Mapping[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for name in KNOWN_DATA_FIELDS:
        if name in raw_data and raw_data[name] is not None:
            value = raw_data[name]
            if name == "options" and isinstance(value, list):
                value = [dict(o) if isinstance(o, Mapping) else o for o in value]
            data[name] = value

    dropped = [k for k in raw_data if k not in KNOWN_DATA_FIELDS]
    if dropped:
        logger.debug("Dropping unknown task data fields: %s", ", ".join(sorted(map(str, dropped))))
    return data


def normalize_task(raw: Mapping[str, Any] | Task, project_type: ProjectType | str) -> Task:
    """
    Slim an upstream task payload (or an existing Task) into a Task.

    Keeps id, created_at, is_labeled and the known data fields. For geospatial
    tasks a missing map_image is filled from image; nothing else is synthesized.
    Normalizing an already normalized task returns an equal Task.
    """
    pt = ProjectType.parse(project_type)

    if isinstance(raw, Task):
        raw_map: Mapping[str, Any] = {
            "id": raw.id,
            "data": raw.data,
            "created_at": raw.created_at,
            "is_labeled": raw.is_labeled,
        }
    elif isinstance(raw, Mapping):
        raw_map = raw
    else:
        raise MalformedTaskError(f"Task payload must be an object, got {type(raw).__name__}")

    task_id = _coerce_id(raw_map.get("id"))

    raw_data = raw_map.get("data")
    data = _project_data(raw_data) if isinstance(raw_data, Mapping) else {}

    if pt is ProjectType.GEOSPATIAL_LABELING and "map_image" not in data and "image" in data:
        data["map_image"] = data["image"]

    created_at = raw_map.get("created_at")
    is_labeled = raw_map.get("is_labeled")

    return Task(
        id=task_id,
        data=data,
        created_at=str(created_at) if created_at is not None else None,
        is_labeled=bool(is_labeled) if is_labeled is not None else None,
    )


def normalize_tasks(raw_tasks: Iterable[Any], project_type: ProjectType | str) -> list[Task]:
    """Normalize a batch; malformed entries are skipped with a warning."""
    out: list[Task] = []
    for raw in raw_tasks:
        try:
            out.append(normalize_task(raw, project_type))
        except MalformedTaskError as e:
            logger.warning("Skipping malformed %s task: %s", project_type, e)
    return out
