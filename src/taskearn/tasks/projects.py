# src/taskearn/tasks/projects.py

"""
Static ProjectType table: backend project id, cache storage key and the
annotation field names (from_name/to_name) used by the labeling config.

The table is read-only. Deployments that use different backend project ids
build a new table with with_project_ids() at start-up.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..core.errors import UnknownProjectTypeError
from .task_models import ProjectType

COMPLETED_TASKS_KEY = "COMPLETED_TASKS"
QUALITY_METRICS_KEY = "TASK_QUALITY_METRICS"


@dataclass(frozen=True, slots=True)
class ProjectSpec:
    project_id: int
    storage_key: str
    from_name: str
    to_name: str


PROJECTS: Mapping[ProjectType, ProjectSpec] = MappingProxyType(
    {
        ProjectType.TEXT_SENTIMENT: ProjectSpec(3, "label_studio_text_tasks", "sentiment", "text"),
        ProjectType.IMAGE_CLASSIFICATION: ProjectSpec(4, "label_studio_image_tasks", "animal_type", "image"),
        ProjectType.AUDIO_CLASSIFICATION: ProjectSpec(5, "label_studio_audio_tasks", "audio_class", "audio"),
        ProjectType.SURVEY: ProjectSpec(6, "label_studio_survey_tasks", "survey_choice", "survey_text"),
        ProjectType.GEOSPATIAL_LABELING: ProjectSpec(7, "label_studio_geospatial_tasks", "geo_feature", "geo_image"),
    }
)


def project_spec(
    project_type: ProjectType | str,
    projects: Mapping[ProjectType, ProjectSpec] = PROJECTS,
) -> ProjectSpec:
    pt = ProjectType.parse(project_type)
    spec = projects.get(pt)
    if spec is None:
        raise UnknownProjectTypeError(project_type)
    return spec


def with_project_ids(overrides: Mapping[str, int]) -> Mapping[ProjectType, ProjectSpec]:
    """Return a new read-only table with some backend project ids replaced."""
    table = dict(PROJECTS)
    for raw_type, project_id in overrides.items():
        pt = ProjectType.parse(raw_type)
        table[pt] = dataclasses.replace(table[pt], project_id=int(project_id))
    return MappingProxyType(table)
