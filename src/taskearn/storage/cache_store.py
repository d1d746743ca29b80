# src/taskearn/storage/cache_store.py

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..core.errors import CacheWriteError, MalformedTaskError, StorageCapacityError
from ..core.ports import KeyValueStore
from ..tasks.normalizer import normalize_task
from ..tasks.projects import COMPLETED_TASKS_KEY, PROJECTS, ProjectSpec, project_spec
from ..tasks.task_models import ProjectType, Task

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_MAX_ENTRIES = 20


class LocalCacheStore:
    """
    Last-known-good task lists per project type, plus the completed-task record.

    Each save replaces the whole list for that project type. Blocking store
    calls run in a worker thread so callers stay on the event loop.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        fallback_max_entries: int = DEFAULT_FALLBACK_MAX_ENTRIES,
        projects: Mapping[ProjectType, ProjectSpec] = PROJECTS,
    ) -> None:
        self._kv = kv
        self._fallback_max_entries = max(1, int(fallback_max_entries))
        self._projects = projects

    def _key(self, project_type: ProjectType | str) -> str:
        return project_spec(project_type, self._projects).storage_key

    @staticmethod
    def _encode(tasks: Sequence[Task]) -> str:
        return json.dumps([t.to_record() for t in tasks], ensure_ascii=False)

    async def save(self, project_type: ProjectType | str, tasks: Sequence[Task | Mapping[str, Any]]) -> None:
        pt = ProjectType.parse(project_type)
        key = self._key(pt)
        slim = [normalize_task(t, pt) for t in tasks]

        try:
            await asyncio.to_thread(self._kv.set, key, self._encode(slim))
        except StorageCapacityError as e:
            reduced = slim[: self._fallback_max_entries]
            logger.warning(
                "Cache for %s too large (%s tasks, %s bytes); retrying with %s",
                pt,
                len(slim),
                e.size,
                len(reduced),
            )
            try:
                await asyncio.to_thread(self._kv.set, key, self._encode(reduced))
            except Exception as retry_error:
                raise CacheWriteError(key, retry_error) from retry_error
            logger.info("Saved %s %s tasks to cache after reduction", len(reduced), pt)
            return
        except Exception as e:
            raise CacheWriteError(key, e) from e

        logger.info("Saved %s %s tasks to cache", len(slim), pt)

    async def load(self, project_type: ProjectType | str) -> list[Task] | None:
        pt = ProjectType.parse(project_type)
        raw = await asyncio.to_thread(self._kv.get, self._key(pt))
        if raw is None:
            return None

        try:
            records = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Cached %s tasks are not valid JSON; ignoring", pt)
            return None
        if not isinstance(records, list):
            logger.warning("Cached %s tasks are not a list; ignoring", pt)
            return None

        tasks: list[Task] = []
        for rec in records:
            try:
                tasks.append(normalize_task(rec, pt))
            except MalformedTaskError:
                logger.debug("Skipping malformed cached %s record: %r", pt, rec)
        logger.debug("Loaded %s %s tasks from cache", len(tasks), pt)
        return tasks

    async def clear(self, project_type: ProjectType | str) -> None:
        pt = ProjectType.parse(project_type)
        await asyncio.to_thread(self._kv.delete, self._key(pt))
        logger.info("Cleared %s task cache", pt)

    # ---- completed-task record (diagnostics only; never filters fetches) ----

    async def completed_tasks(self) -> dict[str, bool]:
        raw = await asyncio.to_thread(self._kv.get, COMPLETED_TASKS_KEY)
        if not raw:
            return {}
        try:
            val = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Completed-task record is not valid JSON; resetting view")
            return {}
        return {str(k): bool(v) for k, v in val.items()} if isinstance(val, dict) else {}

    async def mark_completed(self, task_id: int) -> None:
        record = await self.completed_tasks()
        record[str(task_id)] = True
        await asyncio.to_thread(self._kv.set, COMPLETED_TASKS_KEY, json.dumps(record))

    async def clear_completed(self) -> None:
        await asyncio.to_thread(self._kv.delete, COMPLETED_TASKS_KEY)
