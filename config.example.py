# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific values in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "File logging level (default: INFO).",
    # Paths (gitignored)
    "TASKDESK_DATA_DIR": "Local data directory, also holds taskdesk.log (default: .local/taskdesk).",
    "TASKDESK_DATA_FILE": "JSON snapshot path (default: <data_dir>/taskmanager_data.json).",
    "TASKDESK_EXPORT_DIR": "Where /export writes files (default: <data_dir>/exports).",
    # Timers
    "TASKDESK_TICK_SECONDS": "Timer redraw/poll interval in seconds (default: 1.0).",
    "TASKDESK_COUNT_SKIPPED_WORK": "Count skipped Pomodoro work phases as sessions (default: true).",
    # Display / reports
    "TASKDESK_NOTE_PREVIEW_CHARS": "Characters shown in note previews (default: 100).",
    "TASKDESK_DUE_SOON_DAYS": "Default window for '/task filter due' (default: 7).",
    "TASKDESK_UPCOMING_LIMIT": "How many upcoming tasks /stats lists (default: 5).",
}
