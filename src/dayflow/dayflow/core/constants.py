"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEES = "employees"
ATTENDANCE = "attendance"
LEAVES = "leaves"

# Fixed global lock order; nested acquisitions must follow it.
COLLECTIONS = (EMPLOYEES, ATTENDANCE, LEAVES)

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
DEFAULT_RECENT_LIMIT = 5
MIN_PASSWORD_LENGTH = 6

DEFAULT_ADMIN_ID = "EMP001"
DEFAULT_ADMIN_EMAIL = "admin@dayflow.com"
DEFAULT_ADMIN_PASSWORD = "admin123"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
