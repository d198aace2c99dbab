# src/cluster_tasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs one admin command and prints
its result as JSON on stdout.

Exit codes: 0 success, 1 the remote task (or restore wait) did not succeed,
2 request/response error.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
from dataclasses import asdict
from typing import Any, Callable, Sequence

from ..config import get_settings
from ..errors import ClusterAdminError, RestoreWaitError, TaskError
from ..logging_setup import setup_logging
from ..tasks import operations
from .bootstrap import AppState, create_initial_state

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_REQUEST_FAILED = 2


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _timeout(args: argparse.Namespace, state: AppState) -> float | None:
    if args.timeout is not None:
        return args.timeout if args.timeout > 0 else None
    return state.settings.max_wait


def cmd_backup(args: argparse.Namespace, state: AppState, cancel: threading.Event) -> int:
    result = operations.backup(
        state.client,
        args.destination,
        force_full=args.force_full,
        waiter=state.waiter,
        timeout=_timeout(args, state),
        cancel=cancel,
    )
    _emit({"task_id": result.task_id, "status": result.final.status if result.final else None})
    return EXIT_OK


def cmd_restore(args: argparse.Namespace, state: AppState, cancel: threading.Event) -> int:
    result = operations.restore(
        state.client,
        args.location,
        backup_id=args.backup_id,
        incremental_from=args.incremental_from,
        backup_num=args.backup_num,
        encryption_key_file=args.encryption_key_file,
    )
    out: dict[str, Any] = asdict(result)
    if args.wait:
        out["health_checks"] = operations.wait_for_restore(
            state.client,
            interval_seconds=state.settings.poll_interval_seconds,
            timeout=_timeout(args, state),
            cancel=cancel,
        )
    _emit(out)
    return EXIT_OK


def cmd_wait(args: argparse.Namespace, state: AppState, cancel: threading.Event) -> int:
    poll = state.waiter.await_completion(args.task_id, timeout=_timeout(args, state), cancel=cancel)
    _emit(asdict(poll))
    return EXIT_OK


def cmd_status(args: argparse.Namespace, state: AppState, cancel: threading.Event) -> int:
    _emit({"task_id": args.task_id, "status": state.client.query_status(args.task_id)})
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cluster-tasks", description="Submit cluster admin operations and wait for their tasks.")
    parser.add_argument("--admin-url", default=None, help="Cluster HTTP base URL (overrides CLUSTER_TASKS_ADMIN_URL).")
    sub = parser.add_subparsers(dest="command", required=True)

    p_backup = sub.add_parser("backup", help="Start a backup and wait for it to finish.")
    p_backup.add_argument("destination")
    p_backup.add_argument("--force-full", action="store_true")
    p_backup.add_argument("--timeout", type=float, default=None)
    p_backup.set_defaults(func=cmd_backup)

    p_restore = sub.add_parser("restore", help="Request a restore.")
    p_restore.add_argument("location")
    p_restore.add_argument("--backup-id", default="")
    p_restore.add_argument("--incremental-from", type=int, default=0)
    p_restore.add_argument("--backup-num", type=int, default=0)
    p_restore.add_argument("--encryption-key-file", default="")
    p_restore.add_argument("--wait", action="store_true", help="Wait until no alpha reports an ongoing restore.")
    p_restore.add_argument("--timeout", type=float, default=None)
    p_restore.set_defaults(func=cmd_restore)

    p_wait = sub.add_parser("wait", help="Wait for an existing task.")
    p_wait.add_argument("task_id")
    p_wait.add_argument("--timeout", type=float, default=None)
    p_wait.set_defaults(func=cmd_wait)

    p_status = sub.add_parser("status", help="Print the current status of a task.")
    p_status.add_argument("task_id")
    p_status.set_defaults(func=cmd_status)

    return parser


def run(
        argv: Sequence[str] | None = None,
        *,
        state_factory: Callable[..., AppState] = create_initial_state,
        cancel: threading.Event | None = None,
) -> int:
    """Parse argv, run one command, map errors to exit codes."""
    args = build_parser().parse_args(argv)
    cancel = cancel or threading.Event()

    state = state_factory(admin_url=args.admin_url)
    try:
        return args.func(args, state, cancel)
    except TaskError as e:
        logger.error("%s", e)
        _emit({"error": str(e), "task_id": e.task_id, "status": e.status})
        return EXIT_TASK_FAILED
    except RestoreWaitError as e:
        logger.error("%s", e)
        _emit({"error": str(e), "health_checks": e.checks})
        return EXIT_TASK_FAILED
    except ClusterAdminError as e:
        logger.error("%s", e)
        _emit({"error": str(e)})
        return EXIT_REQUEST_FAILED
    finally:
        state.close()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level, to_file=settings.log_to_file)

    cancel = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, cancelling...", signum)
        cancel.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    sys.exit(run(cancel=cancel))


if __name__ == "__main__":
    main()
