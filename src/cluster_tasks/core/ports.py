# src/cluster_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the waiter and the operations.

Callers pass an explicit capability object instead of reaching for a
module-level "cluster". Anything with the right methods works, which keeps
HTTP out of the polling logic and makes testing easier.
"""

from typing import Any, Mapping, Protocol

JSONDict = dict[str, Any]


class AdminTransport(Protocol):
    """Raw byte transport to the cluster admin endpoint."""

    def post_admin(self, body: bytes) -> bytes: ...

    def alphas_health(self) -> list[str]: ...


class ClusterAdmin(Protocol):
    """
    What the task waiter needs from a cluster.

    submit_admin returns the decoded data payload of a successful response
    and raises RequestError/ResponseError otherwise.
    query_status returns the raw status string of one task.
    """

    def submit_admin(self, operation: str, variables: Mapping[str, Any]) -> JSONDict: ...

    def query_status(self, task_id: str) -> str: ...


class HealthSource(Protocol):
    """One raw health entry per alpha node."""

    def alphas_health(self) -> list[str]: ...
