# src/cluster_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once (unless given),
- wires the HTTP transport, admin client and task waiter together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..admin.client import AdminClient
from ..admin.transport import HttpAdminTransport
from ..config import Settings, get_settings
from ..tasks.task_models import TaskPoll
from ..tasks.waiter import TaskWaiter

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    transport: HttpAdminTransport
    client: AdminClient
    waiter: TaskWaiter

    def close(self) -> None:
        self.transport.close()


def _log_poll(poll: TaskPoll) -> None:
    logger.info("task %s: %s (poll #%d, %.1fs)", poll.task_id, poll.status, poll.attempt, poll.elapsed)


def create_initial_state(*, settings: Settings | None = None, admin_url: str | None = None) -> AppState:
    """
    Build AppState from the provided settings.

    admin_url overrides settings.admin_url (CLI --admin-url).
    """
    if settings is None:
        settings = get_settings()

    transport = HttpAdminTransport(
        admin_url or settings.admin_url,
        timeout=settings.request_timeout_seconds,
        headers=settings.admin_headers(),
    )
    client = AdminClient(transport)
    waiter = TaskWaiter(
        client,
        interval_seconds=settings.poll_interval_seconds,
        on_poll=_log_poll,
    )
    logger.debug("Admin endpoint: %s", transport.base_url)
    return AppState(settings=settings, transport=transport, client=client, waiter=waiter)
