# src/cluster_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Status strings reported by the cluster task query.

    Notes:
    - Only SUCCESS, FAILED and UNKNOWN are terminal.
    - The server may report other in-progress markers; they are kept verbatim
      as plain strings and treated as "still running".
    """

    QUEUED = "Queued"
    RUNNING = "Running"
    SUCCESS = "Success"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def terminal(cls) -> frozenset[str]:
        return frozenset({cls.SUCCESS.value, cls.FAILED.value, cls.UNKNOWN.value})


def is_terminal(status: str) -> bool:
    return status in TaskStatus.terminal()


@dataclass(slots=True, frozen=True)
class TaskPoll:
    """One observation of a task made by the waiter."""

    task_id: str
    status: str
    attempt: int
    elapsed: float

    @property
    def succeeded(self) -> bool:
        return self.status == TaskStatus.SUCCESS


@dataclass(slots=True, frozen=True)
class BackupResult:
    task_id: str
    code: str
    final: TaskPoll | None = None


@dataclass(slots=True, frozen=True)
class RestoreResult:
    code: str
    message: str
