# src/taskearn/tasks/task_service.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import CacheWriteError, TaskFetchError
from ..core.ports import TaskSource
from ..storage.cache_store import LocalCacheStore
from .annotations import build_annotation
from .fallback import FallbackResolver, FetchState
from .fixtures import static_fixtures, survey_tasks
from .normalizer import normalize_task, normalize_tasks
from .quality import QualityMetricsTracker
from .task_models import ProjectType, SubmissionOutcome, Task, ValidationReport
from .validation import validate_submission, validate_task

logger = logging.getLogger(__name__)


class TaskService:
    """
    Public entry point for reading and submitting tasks.

    list_tasks never raises for transient backend failures: it falls back
    to the cache and then to the bundled sets. Only configuration errors
    (unknown project type) escape.
    """

    def __init__(
        self,
        source: TaskSource,
        cache: LocalCacheStore,
        *,
        resolver: FallbackResolver | None = None,
        quality: QualityMetricsTracker | None = None,
    ) -> None:
        self.source = source
        self.cache = cache
        self.resolver = resolver or FallbackResolver(cache)
        self.quality = quality

    async def list_tasks(self, project_type: ProjectType | str) -> list[Task]:
        pt = ProjectType.parse(project_type)

        if pt is ProjectType.SURVEY:
            tasks = survey_tasks()
            self.resolver.last_trail = [FetchState.FETCHING, FetchState.DONE]
            logger.debug("Serving %s bundled survey tasks", len(tasks))
            return tasks

        try:
            raw = await self.source.list_tasks(pt)
        except TaskFetchError as e:
            return await self.resolver.resolve(pt, e)

        self.resolver.last_trail = [FetchState.FETCHING, FetchState.DONE]
        tasks = normalize_tasks(raw, pt)
        if not tasks:
            logger.info("Backend returned no %s tasks; keeping cached copy", pt)
            return tasks

        try:
            await self.cache.save(pt, tasks)
        except CacheWriteError:
            logger.exception("Could not cache %s tasks; returning fresh copy anyway", pt)
        return tasks

    async def submit(
        self,
        project_type: ProjectType | str,
        task: Task | Mapping[str, Any] | None,
        value: Any,
        *,
        started_at: float | None = None,
    ) -> SubmissionOutcome:
        """
        Validate, build and post one annotation.

        An invalid report short-circuits before any network call. SubmissionError
        from the backend propagates to the caller.
        """
        pt = ProjectType.parse(project_type)

        pre = validate_task(task, value)
        if not pre.is_valid:
            logger.info("Submission blocked for %s: %s", pt, "; ".join(pre.errors))
            return SubmissionOutcome(report=pre, annotation=None)

        task_obj = task if isinstance(task, Task) else normalize_task(task, pt)
        annotation = build_annotation(task_obj.id, pt, value)

        post = validate_submission(task_obj, annotation)
        report = ValidationReport(
            is_valid=post.is_valid,
            errors=post.errors,
            warnings=pre.warnings + post.warnings,
        )
        if not report.is_valid:
            logger.info("Annotation for %s task %s invalid: %s", pt, task_obj.id, "; ".join(report.errors))
            return SubmissionOutcome(report=report, annotation=annotation)

        for w in report.warnings:
            logger.warning("%s task %s: %s", pt, task_obj.id, w)

        response = await self.source.submit_annotation(task_obj.id, annotation, pt)

        try:
            await self.cache.mark_completed(task_obj.id)
        except Exception:
            logger.exception("Failed to record task %s as completed", task_obj.id)

        if started_at is not None and self.quality is not None:
            await asyncio.to_thread(self.quality.track, task_obj.id, started_at)

        return SubmissionOutcome(report=report, annotation=annotation, response=response)

    async def completed_tasks(self) -> dict[str, bool]:
        return await self.cache.completed_tasks()

    async def clear_cache(self, project_type: ProjectType | str) -> None:
        await self.cache.clear(project_type)

    async def find_task(self, project_type: ProjectType | str, task_id: int) -> Task | None:
        """Look up a task among the ones list_tasks can serve without the network."""
        pt = ProjectType.parse(project_type)
        if pt is ProjectType.SURVEY:
            candidates = survey_tasks()
        else:
            candidates = (await self.cache.load(pt) or []) + static_fixtures(pt)
        for t in candidates:
            if t.id == task_id:
                return t
        return None
