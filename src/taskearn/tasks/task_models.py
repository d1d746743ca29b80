# src/taskearn/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..core.errors import UnknownProjectTypeError

_ALIASES = {
    "text": "TEXT_SENTIMENT",
    "sentiment": "TEXT_SENTIMENT",
    "image": "IMAGE_CLASSIFICATION",
    "audio": "AUDIO_CLASSIFICATION",
    "survey": "SURVEY",
    "geo": "GEOSPATIAL_LABELING",
    "geospatial": "GEOSPATIAL_LABELING",
}


class ProjectType(StrEnum):
    """Fixed categories of labeling work; each one is a separate backend project."""

    TEXT_SENTIMENT = "TEXT_SENTIMENT"
    IMAGE_CLASSIFICATION = "IMAGE_CLASSIFICATION"
    AUDIO_CLASSIFICATION = "AUDIO_CLASSIFICATION"
    SURVEY = "SURVEY"
    GEOSPATIAL_LABELING = "GEOSPATIAL_LABELING"

    @classmethod
    def parse(cls, raw: ProjectType | str | None) -> ProjectType:
        """Accept enum members, full names (any case) or short aliases (text/image/audio/survey/geo)."""
        if isinstance(raw, ProjectType):
            return raw
        s = (raw or "").strip() if isinstance(raw, str) else ""
        if not s:
            raise UnknownProjectTypeError(raw)
        name = _ALIASES.get(s.lower(), s.upper())
        try:
            return cls(name)
        except ValueError:
            raise UnknownProjectTypeError(raw) from None


@dataclass(frozen=True, slots=True)
class Task:
    """
    Slim task snapshot.

    data holds only the known optional fields (text, image, audio, question, options, ...);
    which of them are present depends on the project type.
    """

    id: int
    data: dict[str, Any]
    created_at: str | None = None
    is_labeled: bool | None = None

    def option_values(self) -> list[str]:
        out: list[str] = []
        for opt in self.data.get("options") or []:
            if isinstance(opt, dict) and "value" in opt:
                out.append(str(opt["value"]))
        return out

    def to_record(self) -> dict[str, Any]:
        """Cache representation: id, created_at and data only."""
        return {"id": self.id, "created_at": self.created_at, "data": dict(self.data)}


@dataclass(frozen=True, slots=True)
class Annotation:
    task_id: int
    result: list[dict[str, Any]]

    def to_payload(self) -> dict[str, Any]:
        return {"task": self.task_id, "result": self.result}

    def selected_choices(self) -> list[str]:
        out: list[str] = []
        for entry in self.result:
            value = entry.get("value") if isinstance(entry, dict) else None
            choices = value.get("choices") if isinstance(value, dict) else None
            if isinstance(choices, list):
                out.extend(str(c) for c in choices)
        return out


@dataclass(slots=True)
class ValidationReport:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """
    Result of TaskService.submit.

    response is None when validation blocked the submission (nothing was sent).
    """

    report: ValidationReport
    annotation: Annotation | None
    response: dict[str, Any] | None = None

    @property
    def submitted(self) -> bool:
        return self.response is not None
