"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CAP_MINUTES = 960  # 16 hours of net work
CAP_REMINDER_OFFSET_MINUTES = 30

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

DEFAULT_REPORT_DAYS = 7
