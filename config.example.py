# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real tokens. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # Cluster admin endpoint
    "CLUSTER_TASKS_ADMIN_URL": "Cluster HTTP base URL (default: http://localhost:8080).",
    "CLUSTER_TASKS_AUTH_TOKEN": "Optional admin access token (sent as X-Dgraph-AccessToken).",
    "CLUSTER_TASKS_REQUEST_TIMEOUT_SECONDS": "Per-request HTTP timeout (default: 30).",
    # Polling
    "CLUSTER_TASKS_POLL_INTERVAL_SECONDS": "Sleep between task status polls (default: 1).",
    "CLUSTER_TASKS_MAX_WAIT_SECONDS": "Give up after this many seconds (default: 0 = wait forever).",
    # Logging
    "CLUSTER_TASKS_LOG_LEVEL": "Console logging level (default: INFO).",
    "CLUSTER_TASKS_LOG_DIR": "Log file directory (default: .local/cluster-tasks).",
    "CLUSTER_TASKS_LOG_TO_FILE": "Write a debug log file (true/false, default: true).",
}
