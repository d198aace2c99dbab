# src/cluster_tasks/tasks/waiter.py

from __future__ import annotations

"""
Task waiter.

Turns "fire an admin mutation, then watch the task it started" into one
blocking call:
- submit the mutation and pull the task id out of the response,
- sleep one interval, query the task status, repeat,
- Success returns; Failed/Unknown raise immediately,
- anything else is "still running" and is polled again.

Request/response errors are never retried. Without a timeout the loop is
unbounded; pass timeout= or a cancel event to bound it.
"""

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Mapping, Sequence

from ..admin.models import dig
from ..core.ports import ClusterAdmin
from ..errors import DecodeError, TaskCancelled, TaskFailed, TaskTimeout, TaskUnknown
from .task_models import TaskPoll, TaskStatus, is_terminal

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 1.0

PollCallback = Callable[[TaskPoll], None]


def extract_task_id(data: Mapping[str, Any], task_path: Sequence[str] | None = None) -> str:
    """
    Find the task id in a mutation's data payload.

    With task_path, walk exactly that path. Otherwise use "<first field>.taskId",
    which is where the backup mutation puts it.
    """
    if task_path:
        raw = dig(data, *task_path)
    else:
        if not data:
            raise DecodeError("admin response has no data; cannot find task id")
        first_key = next(iter(data))
        raw = dig(data, first_key, "taskId")

    if not isinstance(raw, str) or not raw.strip():
        raise DecodeError(f"admin response has an empty task id: {raw!r}")
    return raw


class TaskWaiter:
    """
    Waits for one remote task at a time.

    admin:     explicit cluster capability (submit_admin / query_status)
    sleep:     injectable for tests; default waits on the cancel event (or time.sleep)
    clock:     monotonic seconds, used for deadlines and TaskPoll.elapsed
    on_poll:   called with every observation, terminal ones included
    """

    def __init__(
            self,
            admin: ClusterAdmin,
            *,
            interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
            sleep: Callable[[float], None] | None = None,
            clock: Callable[[], float] = time.monotonic,
            on_poll: PollCallback | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.admin = admin
        self.interval_seconds = float(interval_seconds)
        self._sleep = sleep
        self._clock = clock
        self._on_poll = on_poll

    # ---- submit ----

    def submit(
            self,
            operation: str,
            parameters: Mapping[str, Any],
            *,
            task_path: Sequence[str] | None = None,
    ) -> str:
        data = self.admin.submit_admin(operation, parameters)
        task_id = extract_task_id(data, task_path)
        logger.info("Submitted admin operation, task_id=%s", task_id)
        return task_id

    # ---- blocking wait ----

    def _pause(self, seconds: float, cancel: threading.Event | None) -> None:
        if self._sleep is not None:
            self._sleep(seconds)
        elif cancel is not None:
            cancel.wait(seconds)
        else:
            time.sleep(seconds)

    def _observe(self, task_id: str, attempt: int, started: float) -> TaskPoll:
        status = self.admin.query_status(task_id)
        poll = TaskPoll(
            task_id=task_id,
            status=status,
            attempt=attempt,
            elapsed=self._clock() - started,
        )
        logger.debug("task %s poll #%d: %s", task_id, attempt, status)
        if self._on_poll is not None:
            self._on_poll(poll)
        return poll

    def _settle(self, poll: TaskPoll) -> TaskPoll | None:
        """Return the poll if it is Success, raise on terminal failure, None if still running."""
        if not is_terminal(poll.status):
            return None
        if poll.status == TaskStatus.SUCCESS:
            logger.info("task %s succeeded after %d polls (%.1fs)", poll.task_id, poll.attempt, poll.elapsed)
            return poll
        if poll.status == TaskStatus.FAILED:
            logger.warning("task %s failed after %d polls", poll.task_id, poll.attempt)
            raise TaskFailed(poll.task_id, poll.status)
        logger.warning("task %s reported Unknown after %d polls", poll.task_id, poll.attempt)
        raise TaskUnknown(poll.task_id, poll.status)

    def await_completion(
            self,
            task_id: str,
            *,
            timeout: float | None = None,
            cancel: threading.Event | None = None,
    ) -> TaskPoll:
        started = self._clock()
        deadline = None if timeout is None else started + float(timeout)
        last_status: str | None = None
        attempt = 0

        while True:
            if cancel is not None and cancel.is_set():
                raise TaskCancelled(task_id, last_status)
            if deadline is not None and self._clock() + self.interval_seconds > deadline:
                logger.warning("task %s: giving up after %.1fs (last status: %s)", task_id, timeout, last_status)
                raise TaskTimeout(task_id, last_status, self._clock() - started)

            self._pause(self.interval_seconds, cancel)

            if cancel is not None and cancel.is_set():
                raise TaskCancelled(task_id, last_status)

            attempt += 1
            poll = self._observe(task_id, attempt, started)
            last_status = poll.status
            done = self._settle(poll)
            if done is not None:
                return done

    def run(
            self,
            operation: str,
            parameters: Mapping[str, Any],
            *,
            task_path: Sequence[str] | None = None,
            timeout: float | None = None,
            cancel: threading.Event | None = None,
    ) -> TaskPoll:
        task_id = self.submit(operation, parameters, task_path=task_path)
        return self.await_completion(task_id, timeout=timeout, cancel=cancel)

    # ---- asyncio wait ----

    async def await_completion_async(self, task_id: str, *, timeout: float | None = None) -> TaskPoll:
        """
        Same status rules as await_completion, for callers already inside an event loop.

        The status query is blocking, so it runs in a worker thread. A query that has
        started is always awaited; the deadline is only checked before sleeping.
        To stop waiting, cancel the coroutine/task.
        """
        started = self._clock()
        deadline = None if timeout is None else started + float(timeout)
        last_status: str | None = None
        attempt = 0

        while True:
            if deadline is not None and self._clock() + self.interval_seconds > deadline:
                logger.warning("task %s: giving up after %.1fs (last status: %s)", task_id, timeout, last_status)
                raise TaskTimeout(task_id, last_status, self._clock() - started)

            await asyncio.sleep(self.interval_seconds)

            attempt += 1
            poll = await asyncio.to_thread(self._observe, task_id, attempt, started)
            last_status = poll.status
            done = self._settle(poll)
            if done is not None:
                return done
