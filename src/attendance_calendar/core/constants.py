"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

DEFAULT_REGION = "default"
DEFAULT_TEMPLATE_ID = "standard"
DEFAULT_TEMPLATE_VERSION = "1.0"

YEAR_PATTERN = r"^[0-9]{4}$"
MONTH_PATTERN = r"^(0[1-9]|1[0-2])$"

MIN_DAY = 1
MAX_DAY = 31

# Day-status placeholders returned for the attendance field.
ATTENDANCE_NOT_SET = "not_set"
ATTENDANCE_NOT_APPLICABLE = "not_applicable"
