"""Run the soft-cap sweep once, for crontab setups without the HTTP endpoint.

Exit code 1 when some entries could not be saved (lost a race with a clock action).
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.core.constants import CAP_REMINDER_OFFSET_MINUTES, DEFAULT_CAP_MINUTES
from src.timeclock.timeclock.core.logging_config import configure_logging


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        cap_minutes=int(getattr(settings, "SOFT_CAP_MINUTES", DEFAULT_CAP_MINUTES)),
        reminder_minutes=int(getattr(settings, "CAP_REMINDER_OFFSET_MINUTES", CAP_REMINDER_OFFSET_MINUTES)),
    )
    result = container.soft_cap_service.evaluate_open_entries()
    print(f"Processed {result.processed} entries, flagged {len(result.flagged)}")
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
