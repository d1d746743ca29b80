# src/taskearn/tasks/validation.py

"""
Pre-render / pre-submission checks.

Pure functions: no I/O, no logging. Callers decide whether to block on
errors and where to report warnings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .task_models import Annotation, Task, ValidationReport

MIN_TEXT_LENGTH = 10
URL_PREFIX = "http"
CHOICES_TYPE = "choices"


def _task_parts(task: Task | Mapping[str, Any]) -> tuple[Any, Any]:
    if isinstance(task, Task):
        return task.id, task.data
    return task.get("id"), task.get("data")


def _declared_option_values(data: Any) -> list[str] | None:
    if not isinstance(data, Mapping):
        return None
    options = data.get("options")
    if not isinstance(options, list) or not options:
        return None
    return [str(o["value"]) for o in options if isinstance(o, Mapping) and "value" in o]


def validate_task(task: Task | Mapping[str, Any] | None, selected_option: Any) -> ValidationReport:
    errors: list[str] = []
    warnings: list[str] = []

    if not task:
        errors.append("Task data is missing")
        return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

    task_id, data = _task_parts(task)

    if task_id is None or task_id == "":
        errors.append("Task ID is missing")

    if not data:
        errors.append("Task data is missing")

    if not selected_option:
        errors.append("No option selected")

    if isinstance(data, Mapping):
        audio = data.get("audio")
        if isinstance(audio, str) and audio and not audio.startswith(URL_PREFIX):
            warnings.append("Audio URL might be invalid")

        image = data.get("image")
        if isinstance(image, str) and image and not image.startswith(URL_PREFIX):
            warnings.append("Image URL might be invalid")

        text = data.get("text")
        if isinstance(text, str) and text and len(text) < MIN_TEXT_LENGTH:
            warnings.append("Text content seems too short")

    return ValidationReport(is_valid=not errors, errors=errors, warnings=warnings)


def validate_submission(
    task: Task | Mapping[str, Any] | None,
    annotation: Annotation | Mapping[str, Any] | None,
) -> ValidationReport:
    """
    Check annotation structure and that every selected choice is one of the
    task's declared option values (only when the task declares options).

    Only "choices" entries (or entries without a type) must carry
    value.choices; rating/text/number answers from multi-question surveys
    are checked for from_name/to_name only. Membership is checked on the
    first "choices" entry, the one answering the task's top-level question;
    later questions carry their own option sets.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if isinstance(annotation, Annotation):
        result: Any = annotation.result
    elif isinstance(annotation, Mapping):
        result = annotation.get("result")
    else:
        result = None

    if not result or not isinstance(result, list):
        errors.append("Invalid annotation format")
        return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

    selected: list[str] | None = None
    for i, entry in enumerate(result):
        if not isinstance(entry, Mapping):
            errors.append(f"Result entry {i} is not an object")
            continue
        if not entry.get("from_name"):
            errors.append("Missing from_name in annotation")
        if not entry.get("to_name"):
            errors.append("Missing to_name in annotation")

        if entry.get("type", CHOICES_TYPE) != CHOICES_TYPE:
            continue

        value = entry.get("value")
        choices = value.get("choices") if isinstance(value, Mapping) else None
        if not choices or not isinstance(choices, list):
            errors.append("Missing choices in annotation value")
            continue
        if selected is None:
            selected = [str(c) for c in choices]

    data = _task_parts(task)[1] if task else None
    valid_options = _declared_option_values(data)
    if valid_options is not None and selected:
        if not all(choice in valid_options for choice in selected):
            errors.append("Invalid choice selected")

    return ValidationReport(is_valid=not errors, errors=errors, warnings=warnings)
