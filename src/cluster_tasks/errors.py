# src/cluster_tasks/errors.py

"""Exception hierarchy shared by the admin client, the waiter and the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .admin.models import GraphQLError


class ClusterAdminError(Exception):
    """Base class for every error raised by cluster_tasks."""


# ---- Request side ----


class RequestError(ClusterAdminError):
    """The admin request could not be sent."""


class TransportError(RequestError):
    """Network or HTTP level failure talking to the admin endpoint."""


# ---- Response side ----


class ResponseError(ClusterAdminError):
    """The admin endpoint answered, but the answer is unusable."""


class DecodeError(ResponseError):
    """Malformed body or a missing expected field."""


class RemoteError(ResponseError):
    """The decoded response carried a non-empty error list."""

    def __init__(self, errors: Sequence["GraphQLError"], context: str = "error while running admin query") -> None:
        self.errors = list(errors)
        detail = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{context}: {detail}" if detail else context)


class OperationError(ResponseError):
    """A mutation was accepted by the transport but answered with a non-Success code."""

    def __init__(self, operation: str, code: str | None, message: str | None = None) -> None:
        self.operation = operation
        self.code = code
        self.message = message
        text = f"{operation} failed (code={code!r})"
        if message:
            text += f": {message}"
        super().__init__(text)


# ---- Task side ----


class TaskError(ClusterAdminError):
    """The remote task did not reach Success."""

    def __init__(self, task_id: str, status: str | None, message: str | None = None) -> None:
        self.task_id = task_id
        self.status = status
        super().__init__(message or f"task {task_id} failed with status: {status}")


class TaskFailed(TaskError):
    pass


class TaskUnknown(TaskError):
    pass


class TaskTimeout(TaskError):
    def __init__(self, task_id: str, status: str | None, waited: float) -> None:
        self.waited = waited
        super().__init__(
            task_id,
            status,
            f"task {task_id} still {status or 'pending'} after {waited:.1f}s",
        )


class TaskCancelled(TaskError):
    def __init__(self, task_id: str, status: str | None) -> None:
        super().__init__(task_id, status, f"wait for task {task_id} cancelled (last status: {status})")


# ---- Restore wait ----


class RestoreWaitError(ClusterAdminError):
    """Alphas were still restoring when the wait stopped. There is no task id for a restore."""

    def __init__(self, message: str, checks: int) -> None:
        self.checks = checks
        super().__init__(message)


class RestoreTimeout(RestoreWaitError):
    def __init__(self, checks: int, waited: float) -> None:
        self.waited = waited
        super().__init__(f"restore still running after {waited:.1f}s ({checks} health checks)", checks)


class RestoreCancelled(RestoreWaitError):
    def __init__(self, checks: int) -> None:
        super().__init__(f"wait for restore cancelled after {checks} health checks", checks)


__all__ = [
    "ClusterAdminError",
    "RequestError",
    "TransportError",
    "ResponseError",
    "DecodeError",
    "RemoteError",
    "OperationError",
    "TaskError",
    "TaskFailed",
    "TaskUnknown",
    "TaskTimeout",
    "TaskCancelled",
    "RestoreWaitError",
    "RestoreTimeout",
    "RestoreCancelled",
]
