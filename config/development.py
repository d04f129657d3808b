import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

# Bearer token expected by /api/cron/soft-cap-evaluation; unset disables the check.
CRON_SECRET = os.getenv("CRON_SECRET") or None

SOFT_CAP_MINUTES = int(os.getenv("SOFT_CAP_MINUTES", "960"))
CAP_REMINDER_OFFSET_MINUTES = int(os.getenv("CAP_REMINDER_OFFSET_MINUTES", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
