# src/taskearn/wallet/rewards.py

from __future__ import annotations

from types import MappingProxyType

from ..tasks.task_models import ProjectType

# USDC credited per completed task.
REWARDS = MappingProxyType(
    {
        ProjectType.GEOSPATIAL_LABELING: 5.0,
        ProjectType.IMAGE_CLASSIFICATION: 2.0,
        ProjectType.AUDIO_CLASSIFICATION: 3.0,
        ProjectType.TEXT_SENTIMENT: 1.5,
        ProjectType.SURVEY: 1.0,
    }
)


def reward_for(project_type: ProjectType | str) -> float:
    return REWARDS[ProjectType.parse(project_type)]
