# tests/fakes.py

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from cluster_tasks.core.ports import JSONDict


class ScriptedAdmin:
    """
    Fake ClusterAdmin for waiter tests.

    - query_status pops the next scripted item; an Exception item is raised instead
    - submit_admin returns submit_data (or raises submit_error)
    - every call is recorded for assertions
    """

    def __init__(
        self,
        statuses: list[str | Exception] | None = None,
        *,
        submit_data: JSONDict | None = None,
        submit_error: Exception | None = None,
    ) -> None:
        self.statuses = list(statuses or [])
        self.submit_data = submit_data if submit_data is not None else {"backup": {"taskId": "0x1234"}}
        self.submit_error = submit_error
        self.submitted: list[tuple[str, dict[str, Any]]] = []
        self.polled: list[str] = []

    def submit_admin(self, operation: str, variables: Mapping[str, Any]) -> JSONDict:
        self.submitted.append((operation, dict(variables)))
        if self.submit_error is not None:
            raise self.submit_error
        return self.submit_data

    def query_status(self, task_id: str) -> str:
        self.polled.append(task_id)
        if not self.statuses:
            raise AssertionError("query_status called more times than scripted")
        item = self.statuses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeClock:
    """Monotonic clock whose sleep() just advances time."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@dataclass(slots=True)
class FakeTransport:
    """
    Fake AdminTransport: replies to post_admin with queued JSON bodies.

    replies items may be dicts (JSON-encoded), raw bytes, or Exceptions (raised).
    health items are lists returned by successive alphas_health() calls.
    """

    replies: list[Any] = field(default_factory=list)
    health: list[Any] = field(default_factory=list)
    posted: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False

    def post_admin(self, body: bytes) -> bytes:
        self.posted.append(json.loads(body))
        item = self.replies.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, bytes):
            return item
        return json.dumps(item).encode("utf-8")

    def alphas_health(self) -> list[str]:
        item = self.health.pop(0)
        if isinstance(item, Exception):
            raise item
        return list(item)

    def close(self) -> None:
        self.closed = True
