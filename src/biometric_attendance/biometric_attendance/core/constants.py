"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

TIME_IN_WINDOW_START = time(6, 0, 0)
TIME_IN_WINDOW_END = time(12, 0, 0)
TIME_OUT_WINDOW_START = time(12, 1, 0)
TIME_OUT_WINDOW_END = time(19, 0, 0)

DEFAULT_REQUIRED_TIME_IN = time(8, 0)
DEFAULT_REQUIRED_TIME_OUT = time(22, 0)
DEFAULT_BREAK_DURATION_MINUTES = 0
DEFAULT_BREAK_IS_COUNTED = False

REMARKS_COMPLETE = "Complete"
REMARKS_MISSING_TIME_OUT = "Missing Time Out"
REMARKS_MISSING_TIME_IN = "Missing Time In"
REMARKS_MISSING_BOTH = "Missing Time In & Time Out"
REMARKS_ON_LEAVE = "On leave"

# The lunch break starts this many hours after the required start.
MORNING_BLOCK_HOURS = 4

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 0.05

EMPLOYEE_CODE_MAX_LENGTH = 50
