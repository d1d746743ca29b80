# src/taskearn/core/errors.py

"""
Exception taxonomy.

- TaskFetchError: transient read failure (retries exhausted); handled by the fallback resolver
- UnknownProjectTypeError: configuration/programming error, never recovered from
- SubmissionError: annotation POST failed; never retried automatically
- StorageCapacityError / CacheWriteError: cache write faults
Validation problems are not exceptions (see tasks/validation.py).
"""

from __future__ import annotations


class TaskEarnError(Exception):
    """Base class for all errors raised by taskearn."""


class UnknownProjectTypeError(TaskEarnError, ValueError):
    def __init__(self, project_type: object) -> None:
        super().__init__(f"Unknown project type: {project_type!r}")
        self.project_type = project_type


class TaskFetchError(TaskEarnError):
    """All read attempts for a project failed."""

    def __init__(self, project_type: str, attempts: int, last_error: BaseException | None) -> None:
        reason = f"{type(last_error).__name__}: {last_error}" if last_error is not None else "unknown"
        super().__init__(f"Failed to fetch {project_type} tasks after {attempts} attempt(s) ({reason})")
        self.project_type = project_type
        self.attempts = attempts
        self.last_error = last_error


class SubmissionError(TaskEarnError):
    """
    Annotation submission failed.

    status_code is None when the request never got an HTTP response.
    """

    def __init__(self, task_id: int, status_code: int | None, detail: str) -> None:
        status = status_code if status_code is not None else "no response"
        super().__init__(f"Annotation for task {task_id} rejected ({status}): {detail}")
        self.task_id = task_id
        self.status_code = status_code
        self.detail = detail


class MalformedTaskError(TaskEarnError, ValueError):
    """Upstream task payload cannot be turned into a Task (e.g. no integer id)."""


class StorageCapacityError(TaskEarnError):
    """The key-value medium refused a value because it is too large / full."""

    def __init__(self, key: str, size: int, limit: int | None = None) -> None:
        lim = f" (limit {limit} bytes)" if limit is not None else ""
        super().__init__(f"Value for key {key!r} does not fit: {size} bytes{lim}")
        self.key = key
        self.size = size
        self.limit = limit


class CacheWriteError(TaskEarnError):
    """Cache write failed even after the truncated retry."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Cache write failed for {key!r}: {cause}")
        self.key = key
        self.cause = cause


class InsufficientBalanceError(TaskEarnError):
    def __init__(self, user_id: str, requested: float, available: float) -> None:
        super().__init__(
            f"Insufficient balance for {user_id}: requested {requested:.2f}, available {available:.2f}"
        )
        self.user_id = user_id
        self.requested = requested
        self.available = available
