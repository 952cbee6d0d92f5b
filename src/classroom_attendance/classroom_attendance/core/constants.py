"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_STORAGE_RETRIES = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 0.05
DEFAULT_EXPORT_FILENAME = "attendance_history.csv"
