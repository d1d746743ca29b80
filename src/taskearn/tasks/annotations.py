# src/taskearn/tasks/annotations.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .projects import project_spec
from .task_models import Annotation, ProjectType

logger = logging.getLogger(__name__)

RESULT_TYPE = "choices"
SURVEY_COMPLETED_MARKER = "completed"


def _choices_entry(from_name: str, to_name: str, choices: list[Any]) -> dict[str, Any]:
    return {
        "from_name": from_name,
        "to_name": to_name,
        "type": RESULT_TYPE,
        "value": {"choices": choices},
    }


def _as_choices(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return [v for v in value if v]
    return [value] if value else []


def build_result(project_type: ProjectType | str, selected_value: Any) -> list[dict[str, Any]]:
    """
    Build the annotation `result` list for one task.

    SURVEY expects the caller to pass {"result": [...]} (one entry per survey
    question); anything else falls back to a single survey_choice entry.
    """
    pt = ProjectType.parse(project_type)
    spec = project_spec(pt)

    if pt is ProjectType.SURVEY:
        if isinstance(selected_value, Mapping) and "result" in selected_value:
            result = selected_value["result"]
            return list(result) if isinstance(result, list) else []

        logger.warning("Survey annotation has no result list; using single-choice fallback")
        marker = selected_value if isinstance(selected_value, str) else SURVEY_COMPLETED_MARKER
        return [_choices_entry(spec.from_name, spec.to_name, [marker])]

    return [_choices_entry(spec.from_name, spec.to_name, _as_choices(selected_value))]


def build_annotation(task_id: int, project_type: ProjectType | str, selected_value: Any) -> Annotation:
    return Annotation(task_id=int(task_id), result=build_result(project_type, selected_value))
