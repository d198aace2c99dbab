# src/cluster_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole tool.
- No secrets required at import time.
- Every value has a default that works against a local cluster.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

ENV_PREFIX = "CLUSTER_TASKS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Cluster admin endpoint ----
    admin_url: str
    auth_token: Optional[str]
    request_timeout_seconds: float

    # ---- Polling ----
    poll_interval_seconds: float
    # 0 or less means "no deadline"
    max_wait_seconds: float

    # ---- Logging ----
    log_level: str
    log_dir: Path
    log_to_file: bool

    @property
    def max_wait(self) -> float | None:
        return self.max_wait_seconds if self.max_wait_seconds > 0 else None

    def admin_headers(self) -> Dict[str, str]:
        if not self.auth_token:
            return {}
        return {"X-Dgraph-AccessToken": self.auth_token}

    @staticmethod
    def from_env() -> "Settings":
        _load_dotenv_if_available()

        admin_url = _env(_k("ADMIN_URL"), "http://localhost:8080").strip().rstrip("/")
        auth_token = _env(_k("AUTH_TOKEN"), "").strip() or None
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 30.0)

        # Never poll in a hot loop, even if misconfigured.
        poll_interval_seconds = max(0.05, _env_float(_k("POLL_INTERVAL_SECONDS"), 1.0))
        max_wait_seconds = _env_float(_k("MAX_WAIT_SECONDS"), 0.0)

        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_dir = _env_path(_k("LOG_DIR"), Path(".local/cluster-tasks"))
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        return Settings(
            admin_url=admin_url,
            auth_token=auth_token,
            request_timeout_seconds=request_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            max_wait_seconds=max_wait_seconds,
            log_level=log_level,
            log_dir=log_dir,
            log_to_file=log_to_file,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
