"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ARCHIVE_MONTHS = 6
DEFAULT_RETENTION_DAYS = 730
MAX_ARCHIVE_MONTHS = 1200
MIN_RETENTION_DAYS = 1
MAX_RETENTION_DAYS = 36500
DEFAULT_AUTO_PURGE_DELAY_SECONDS = 0.5
DEFAULT_API_TIMEOUT_SECONDS = 10.0

REASON_MANUAL_DELETE = "Manually deleted by user"
REASON_EMPLOYEE_ARCHIVED = "Employee archived via UI"
REASON_AUTO_INACTIVE = "Automatic archive - inactive {entity}"
