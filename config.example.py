# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Initial data
    "TASKBOARD_TASKS_SOURCE": "http(s) URL or JSON file path with task records (default: tasks.json).",
    "TASKBOARD_LOAD_TIMEOUT_SECONDS": "HTTP timeout for the initial load (default: 10).",
    "TASKBOARD_SEED_COUNT": "Placeholder tasks generated when the source has none (default: 50).",
    "TASKBOARD_SEED": "Optional RNG seed for placeholder tasks.",
    # Console
    "TASKBOARD_UNDO_WINDOW_SECONDS": "How long /undo stays available after /del (default: 10).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory for logs and exports (default: .local/taskboard).",
    "TASKBOARD_EXPORT_PATH": "Default /export target (default: <data_dir>/tasks.csv).",
}
