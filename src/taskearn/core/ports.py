# src/taskearn/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the backend client and the storage medium swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Annotation, ProjectType, Task

RawTask = dict[str, Any]
# Upstream task object as returned by the backend: {"id": ..., "data": {...}, ...}.


class CredentialProvider(Protocol):
    """Returns the backend auth token; called on every request so tokens can rotate."""
    def __call__(self) -> str: ...


class KeyValueStore(Protocol):
    """
    Durable string store with atomic whole-value replace per key.

    set() raises StorageCapacityError when the value does not fit.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class TaskSource(Protocol):
    async def list_tasks(self, project_type: ProjectType | str) -> list[RawTask]: ...

    async def submit_annotation(
            self,
            task_id: int,
            annotation: Annotation,
            project_type: ProjectType | str,
    ) -> dict[str, Any]: ...


class TaskCache(Protocol):
    async def save(self, project_type: ProjectType | str, tasks: Sequence[Task]) -> None: ...
    async def load(self, project_type: ProjectType | str) -> list[Task] | None: ...
    async def clear(self, project_type: ProjectType | str) -> None: ...
