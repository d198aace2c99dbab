# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from cluster_tasks.admin.client import AdminClient
from cluster_tasks.cli.bootstrap import AppState
from cluster_tasks.tasks.waiter import TaskWaiter

from .fakes import FakeClock, FakeTransport


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def client(transport: FakeTransport) -> AdminClient:
    return AdminClient(transport)


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        admin_url="http://alpha:8080",
        poll_interval_seconds=0.01,
        max_wait=None,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, transport: FakeTransport, client: AdminClient, clock: FakeClock) -> AppState:
    """AppState wired with the fake transport and a clock that never really sleeps."""
    waiter = TaskWaiter(client, interval_seconds=1.0, sleep=clock.sleep, clock=clock)
    return AppState(settings=settings, transport=transport, client=client, waiter=waiter)
