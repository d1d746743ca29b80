# src/taskearn/tasks/fallback.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import TaskCache
from .fixtures import static_fixtures, survey_tasks
from .task_models import ProjectType, Task

logger = logging.getLogger(__name__)


class FetchState(StrEnum):
    FETCHING = "FETCHING"
    DONE = "DONE"
    FALLING_BACK = "FALLING_BACK"
    STATIC_FALLBACK = "STATIC_FALLBACK"


class FallbackResolver:
    """
    Serves tasks after the remote source gave up.

    FALLING_BACK tries the cache first; an empty or missing entry moves to
    STATIC_FALLBACK and the bundled set for the project type. resolve() never
    raises for cache problems and always returns a list.
    """

    def __init__(self, cache: TaskCache) -> None:
        self._cache = cache
        self.last_trail: list[FetchState] = []

    async def resolve(self, project_type: ProjectType | str, last_error: BaseException | None = None) -> list[Task]:
        pt = ProjectType.parse(project_type)
        trail = [FetchState.FETCHING, FetchState.FALLING_BACK]
        self.last_trail = trail

        logger.warning("Falling back for %s tasks (reason: %s)", pt, last_error)

        if pt is ProjectType.SURVEY:
            # SURVEY never has a network source; its bundled set is authoritative.
            tasks = survey_tasks()
            trail.append(FetchState.DONE)
            return tasks

        cached: list[Task] | None = None
        try:
            cached = await self._cache.load(pt)
        except Exception:
            logger.exception("Cache read failed for %s; treating as miss", pt)

        if cached:
            logger.info("Serving %s cached %s tasks", len(cached), pt)
            trail.append(FetchState.DONE)
            return cached

        trail.append(FetchState.STATIC_FALLBACK)
        tasks = static_fixtures(pt)
        logger.info("Serving %s bundled %s tasks", len(tasks), pt)
        trail.append(FetchState.DONE)
        return tasks
