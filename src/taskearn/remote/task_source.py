# src/taskearn/remote/task_source.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from ..core.errors import SubmissionError, TaskFetchError
from ..core.ports import CredentialProvider, RawTask
from ..tasks.projects import PROJECTS, ProjectSpec, project_spec
from ..tasks.task_models import Annotation, ProjectType

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0


class BadPayloadError(ValueError):
    """Task list response is neither a JSON array nor a {"results": [...]} envelope."""


def _extract_tasks(payload: Any) -> list[RawTask]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping) and isinstance(payload.get("results"), list):
        return list(payload["results"])
    raise BadPayloadError(f"Unexpected task list payload: {type(payload).__name__}")


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason_phrase
    if isinstance(body, Mapping):
        for key in ("detail", "error"):
            if body.get(key):
                return str(body[key])
    return resp.text.strip()


def _decode_body(resp: httpx.Response) -> dict[str, Any]:
    if not resp.content:
        return {}
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {"response": body}


class RemoteTaskSource:
    """
    HTTP accessor for a Label Studio compatible backend.

    Reads are retried (bounded, sequential, fixed delay) and end in
    TaskFetchError. Writes are never retried.
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        projects: Mapping[ProjectType, ProjectSpec] = PROJECTS,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._timeout = float(timeout)
        self._max_attempts = max(1, int(max_attempts))
        self._retry_delay = max(0.0, float(retry_delay))
        self._projects = projects
        self._sleep = sleep

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))

    async def __aenter__(self) -> RemoteTaskSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Token {self._credentials()}",
            "Content-Type": "application/json",
        }

    # ---- reads ----

    async def _fetch_once(self, url: str) -> list[RawTask]:
        async with asyncio.timeout(self._timeout):
            resp = await self._client.get(url, headers=self._headers(), timeout=self._timeout)
        resp.raise_for_status()
        return _extract_tasks(resp.json())

    async def list_tasks(self, project_type: ProjectType | str) -> list[RawTask]:
        pt = ProjectType.parse(project_type)
        spec = project_spec(pt, self._projects)
        url = f"{self._base_url}/api/projects/{spec.project_id}/tasks/"

        last_error: BaseException | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                tasks = await self._fetch_once(url)
            except (httpx.HTTPError, TimeoutError, ValueError) as e:
                last_error = e
                logger.warning(
                    "Fetch %s tasks attempt %s/%s failed: %s: %s",
                    pt,
                    attempt,
                    self._max_attempts,
                    type(e).__name__,
                    e,
                )
                if attempt < self._max_attempts:
                    await self._sleep(self._retry_delay)
                continue

            logger.info("Fetched %s %s tasks (attempt %s)", len(tasks), pt, attempt)
            return tasks

        raise TaskFetchError(str(pt), self._max_attempts, last_error)

    # ---- writes ----

    async def submit_annotation(
        self,
        task_id: int,
        annotation: Annotation,
        project_type: ProjectType | str,
    ) -> dict[str, Any]:
        pt = ProjectType.parse(project_type)
        url = f"{self._base_url}/api/tasks/{task_id}/annotations/"
        payload = annotation.to_payload()

        try:
            resp = await self._client.post(url, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            raise SubmissionError(task_id, None, f"{type(e).__name__}: {e}") from e

        if not resp.is_success:
            detail = _error_detail(resp)
            logger.error("Annotation for %s task %s rejected: %s %s", pt, task_id, resp.status_code, detail)
            raise SubmissionError(task_id, resp.status_code, detail)

        logger.info("Submitted annotation for %s task %s", pt, task_id)
        return _decode_body(resp)

    async def update_task_data(self, task_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """Overwrite a task's data on the backend (maintenance only)."""
        url = f"{self._base_url}/api/tasks/{task_id}/"
        try:
            resp = await self._client.patch(url, headers=self._headers(), json={"data": dict(data)})
        except httpx.HTTPError as e:
            raise SubmissionError(task_id, None, f"{type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise SubmissionError(task_id, resp.status_code, _error_detail(resp))
        logger.info("Updated data for task %s", task_id)
        return _decode_body(resp)
