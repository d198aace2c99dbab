# tests/test_operations.py

from __future__ import annotations

import threading

import pytest

from cluster_tasks.admin.client import AdminClient
from cluster_tasks.errors import OperationError, RestoreCancelled, RestoreTimeout, TaskFailed, TransportError
from cluster_tasks.tasks import operations
from cluster_tasks.tasks.waiter import TaskWaiter

from .fakes import FakeClock, FakeTransport


def backup_reply(code: str = "Success", task_id: str = "0x10") -> dict:
    return {"data": {"backup": {"response": {"code": code}, "taskId": task_id}}}


def status_reply(status: str) -> dict:
    return {"data": {"task": {"status": status}}}


def test_backup_waits_for_task(client: AdminClient, transport: FakeTransport, clock: FakeClock) -> None:
    transport.replies.extend([backup_reply(), status_reply("Running"), status_reply("Success")])
    waiter = TaskWaiter(client, sleep=clock.sleep, clock=clock)

    result = operations.backup(client, "/backups/nightly", force_full=True, waiter=waiter)

    assert result.task_id == "0x10"
    assert result.final is not None and result.final.attempt == 2
    assert transport.posted[0]["variables"] == {"dst": "/backups/nightly", "ff": True}
    assert transport.posted[1]["variables"] == {"id": "0x10"}


def test_backup_rejected_code_does_not_poll(client: AdminClient, transport: FakeTransport) -> None:
    transport.replies.append(backup_reply(code="Failure"))

    with pytest.raises(OperationError) as exc_info:
        operations.backup(client, "/backups")

    assert exc_info.value.code == "Failure"
    assert len(transport.posted) == 1


def test_backup_task_failure_propagates(client: AdminClient, transport: FakeTransport, clock: FakeClock) -> None:
    transport.replies.extend([backup_reply(), status_reply("Failed")])
    waiter = TaskWaiter(client, sleep=clock.sleep, clock=clock)

    with pytest.raises(TaskFailed):
        operations.backup(client, "/backups", waiter=waiter)


def test_restore_sends_all_variables(client: AdminClient, transport: FakeTransport) -> None:
    transport.replies.append({"data": {"restore": {"code": "Success", "message": "Restore operation started."}}})

    result = operations.restore(
        client,
        "/backups/nightly",
        backup_id="quirky_kapitsa6",
        incremental_from=2,
        backup_num=3,
        encryption_key_file="/keys/enc",
    )

    assert result.code == "Success"
    assert result.message == "Restore operation started."
    assert transport.posted[0]["variables"] == {
        "location": "/backups/nightly",
        "backupId": "quirky_kapitsa6",
        "incrFrom": 2,
        "backupNum": 3,
        "encKey": "/keys/enc",
    }


def test_restore_failure_code(client: AdminClient, transport: FakeTransport) -> None:
    transport.replies.append({"data": {"restore": {"code": "Failure", "message": "no backups found"}}})

    with pytest.raises(OperationError, match="no backups found"):
        operations.restore(client, "/nowhere")


def test_wait_for_restore_until_no_alpha_restoring(
    client: AdminClient, transport: FakeTransport, clock: FakeClock
) -> None:
    transport.health.extend(
        [
            ['{"ongoing": ["opRestore"]}', '{"ongoing": []}'],
            ['{"ongoing": []}', '{"ongoing": ["opRestore"]}'],
            ['{"ongoing": []}', '{"ongoing": []}'],
        ]
    )

    checks = operations.wait_for_restore(client, sleep=clock.sleep, clock=clock)

    assert checks == 3
    assert clock.sleeps == [1.0, 1.0, 1.0]


def test_wait_for_restore_errors_and_timeout(
    client: AdminClient, transport: FakeTransport, clock: FakeClock
) -> None:
    transport.health.append(TransportError("alpha down"))
    with pytest.raises(TransportError):
        operations.wait_for_restore(client, sleep=clock.sleep, clock=clock)

    transport.health.extend([["opRestore"]] * 5)
    with pytest.raises(RestoreTimeout) as exc_info:
        operations.wait_for_restore(client, timeout=2.0, sleep=clock.sleep, clock=clock)
    assert len(transport.health) == 3
    assert exc_info.value.checks == 2


def test_wait_for_restore_cancelled_mid_wait(
    client: AdminClient, transport: FakeTransport, clock: FakeClock
) -> None:
    transport.health.extend([["opRestore"]] * 5)
    cancel = threading.Event()

    def sleep(seconds: float) -> None:
        clock.sleep(seconds)
        if len(transport.health) == 3:
            cancel.set()

    with pytest.raises(RestoreCancelled) as exc_info:
        operations.wait_for_restore(client, cancel=cancel, sleep=sleep, clock=clock)

    assert exc_info.value.checks == 2
    assert len(transport.health) == 3


def test_wait_for_restore_cancel_event_interrupts_sleep(client: AdminClient, transport: FakeTransport) -> None:
    transport.health.extend([["opRestore"]] * 5)
    cancel = threading.Event()
    timer = threading.Timer(0.05, cancel.set)
    timer.start()
    try:
        with pytest.raises(RestoreCancelled):
            operations.wait_for_restore(client, interval_seconds=30.0, cancel=cancel)
    finally:
        timer.cancel()

    assert len(transport.health) == 5
