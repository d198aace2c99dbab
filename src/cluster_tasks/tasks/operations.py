# src/cluster_tasks/tasks/operations.py

from __future__ import annotations

"""
Backup/restore operations built on the admin client and the task waiter.

backup:            mutation -> check response code -> wait for the task it started
restore:           mutation -> check response code (restore has no task id)
wait_for_restore:  poll alpha health until no alpha reports an ongoing restore
"""

import logging
import threading
import time
from typing import Callable

from ..admin.client import AdminClient
from ..admin.models import AdminRequest, dig
from ..core.ports import HealthSource
from ..errors import DecodeError, OperationError, RestoreCancelled, RestoreTimeout
from .task_models import BackupResult, RestoreResult
from .waiter import TaskWaiter, extract_task_id

logger = logging.getLogger(__name__)

RESTORE_IN_PROGRESS_MARKER = "opRestore"
SUCCESS_CODE = "Success"

BACKUP_MUTATION = """mutation backup($dst: String!, $ff: Boolean!) {
	backup(input: {destination: $dst, forceFull: $ff}) {
		response {
			code
		}
		taskId
	}
}"""

RESTORE_MUTATION = """mutation restore($location: String!, $backupId: String,
		$incrFrom: Int, $backupNum: Int, $encKey: String) {
	restore(input: {location: $location, backupId: $backupId, incrementalFrom: $incrFrom,
			backupNum: $backupNum, encryptionKeyFile: $encKey}) {
		code
		message
	}
}"""


def backup(
        client: AdminClient,
        destination: str,
        *,
        force_full: bool = False,
        waiter: TaskWaiter | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
) -> BackupResult:
    """
    Start a backup to destination and block until its task finishes.

    The mutation must answer response.code == "Success"; otherwise OperationError
    is raised before any polling.
    """
    data = client.run_admin_query(
        AdminRequest(query=BACKUP_MUTATION, variables={"dst": destination, "ff": force_full})
    )
    code = dig(data, "backup", "response", "code")
    if code != SUCCESS_CODE:
        raise OperationError("backup", code)

    task_id = extract_task_id(data, ("backup", "taskId"))
    logger.info("Backup to %s started (force_full=%s), task_id=%s", destination, force_full, task_id)

    waiter = waiter or TaskWaiter(client)
    final = waiter.await_completion(task_id, timeout=timeout, cancel=cancel)
    return BackupResult(task_id=task_id, code=code, final=final)


def restore(
        client: AdminClient,
        location: str,
        *,
        backup_id: str = "",
        incremental_from: int = 0,
        backup_num: int = 0,
        encryption_key_file: str = "",
) -> RestoreResult:
    """Request a restore from location. Returns once the cluster has accepted it."""
    data = client.run_admin_query(
        AdminRequest(
            query=RESTORE_MUTATION,
            variables={
                "location": location,
                "backupId": backup_id,
                "incrFrom": incremental_from,
                "backupNum": backup_num,
                "encKey": encryption_key_file,
            },
        )
    )
    payload = dig(data, "restore")
    if not isinstance(payload, dict):
        raise DecodeError("error unmarshalling restore response: 'restore' is not an object")

    code = str(payload.get("code") or "")
    message = str(payload.get("message") or "")
    if code != SUCCESS_CODE:
        raise OperationError("restore", code, message)

    logger.info("Restore from %s accepted: %s", location, message or code)
    return RestoreResult(code=code, message=message)


def restore_in_progress(health: list[str]) -> bool:
    return any(RESTORE_IN_PROGRESS_MARKER in entry for entry in health)


def wait_for_restore(
        source: HealthSource,
        *,
        interval_seconds: float = 1.0,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
        sleep: Callable[[float], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
) -> int:
    """
    Block until no alpha reports an ongoing restore.

    Same cadence as TaskWaiter: sleep first, then look. Returns the number of
    health checks made. Errors from the health call propagate.
    """
    started = clock()
    deadline = None if timeout is None else started + float(timeout)
    checks = 0

    while True:
        if cancel is not None and cancel.is_set():
            raise RestoreCancelled(checks)
        if deadline is not None and clock() + interval_seconds > deadline:
            raise RestoreTimeout(checks, clock() - started)

        if sleep is not None:
            sleep(interval_seconds)
        elif cancel is not None:
            cancel.wait(interval_seconds)
        else:
            time.sleep(interval_seconds)

        if cancel is not None and cancel.is_set():
            raise RestoreCancelled(checks)

        checks += 1
        health = source.alphas_health()
        if not restore_in_progress(health):
            logger.info("Restore finished on all %d alphas (%d checks)", len(health), checks)
            return checks
        logger.debug("restore still running (check #%d)", checks)
