# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBUDDY_APP_NAME": "App display name (default: TaskBuddy).",
    "TASKBUDDY_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKBUDDY_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "TASKBUDDY_DATA_DIR": "Local data directory (default: .local/taskbuddy).",
    "TASKBUDDY_STORE_DB_PATH": "Key/value SQLite path (default: <data_dir>/taskbuddy.sqlite3).",
    "TASKBUDDY_EXPORT_DIR": "Where /export writes backups (default: <data_dir>/exports).",
    # Tasks
    "TASKBUDDY_STORAGE_KEY": "Key of the saved snapshot record (default: taskbuddy-snapshot).",
    "TASKBUDDY_DEFAULT_CATEGORY": (
        "Category for new tasks and for stored tasks with an unknown category "
        "(Personal, Work, Health, Shopping, Learning; default: Personal)."
    ),
}
