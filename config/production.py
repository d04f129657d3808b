import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

CRON_SECRET = os.getenv("CRON_SECRET") or None

SOFT_CAP_MINUTES = int(os.getenv("SOFT_CAP_MINUTES", "960"))
CAP_REMINDER_OFFSET_MINUTES = int(os.getenv("CAP_REMINDER_OFFSET_MINUTES", "30"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
