from __future__ import annotations

from dataclasses import dataclass

from .core.constants import CAP_REMINDER_OFFSET_MINUTES, DEFAULT_CAP_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .payroll.service import CapReportService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import SoftCapEvaluationService, TimeClockService


@dataclass(frozen=True)
class Container:
    entries_repo: TimeEntryRepository

    time_clock_service: TimeClockService
    soft_cap_service: SoftCapEvaluationService
    cap_report_service: CapReportService


def build_services(
    entries_repo: TimeEntryRepository,
    *,
    cap_minutes: int = DEFAULT_CAP_MINUTES,
    reminder_minutes: int = CAP_REMINDER_OFFSET_MINUTES,
) -> Container:
    return Container(
        entries_repo=entries_repo,
        time_clock_service=TimeClockService(entries_repo, cap_minutes=cap_minutes, reminder_minutes=reminder_minutes),
        soft_cap_service=SoftCapEvaluationService(entries_repo, reminder_minutes=reminder_minutes),
        cap_report_service=CapReportService(entries_repo),
    )


def build_container(
    *,
    db_config: dict,
    cap_minutes: int = DEFAULT_CAP_MINUTES,
    reminder_minutes: int = CAP_REMINDER_OFFSET_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        MySQLTimeEntryRepository(conn),
        cap_minutes=cap_minutes,
        reminder_minutes=reminder_minutes,
    )
