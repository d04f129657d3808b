from __future__ import annotations

from datetime import date, datetime, timezone

from src.timeclock.timeclock.core.enums import FlagStatus, ShiftState
from src.timeclock.timeclock.payroll.service import CapReportService
from src.timeclock.timeclock.time_entries.model import ShiftCapRecord


def utc(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 1, day, hour, minute, tzinfo=timezone.utc)


class FakeTimeEntriesRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def list_for_range(self, *, start_date: date, end_date: date, user_id=None):
        self.last_args = {
            "start_date": start_date,
            "end_date": end_date,
            "user_id": user_id,
        }
        return self._rows


def closed(entry_id: int, user_id: int, hours: int, *, flag=FlagStatus.NONE) -> ShiftCapRecord:
    return ShiftCapRecord(
        id=entry_id,
        user_id=user_id,
        clock_in=utc(3, 6),
        clock_out=utc(3, 6 + min(hours + 1, 17)),
        state=ShiftState.CLOCKED_OUT,
        work_accum_seconds=hours * 3600,
        last_state_change_at=utc(3, 6 + min(hours + 1, 17)),
        flag_status=flag,
        over_cap_at=utc(3, 22) if flag == FlagStatus.OVER_CAP else None,
    )


def test_report_shows_raw_and_effective_hours():
    rows = [closed(1, 5, 18, flag=FlagStatus.OVER_CAP)]

    report = CapReportService(FakeTimeEntriesRepo(rows)).build_cap_report(
        start=date(2026, 1, 3), end=date(2026, 1, 3), now=utc(4, 12)
    )

    row = report.rows[0]
    assert row["raw_hours"] == "18:00"
    assert row["effective_hours"] == "16:00"
    assert row["work_date"] == "2026-01-03"
    assert row["clock_in"] == "06:00"
    assert row["flag_status"] == "OVER_CAP"
    assert report.exceptions == ["Employee 5: over 16-hour cap flagged"]


def test_report_lists_open_entries_as_exceptions():
    open_entry = ShiftCapRecord(
        id=3,
        user_id=9,
        clock_in=utc(3, 8),
        last_state_change_at=utc(3, 8),
    )

    report = CapReportService(FakeTimeEntriesRepo([open_entry])).build_cap_report(
        start=date(2026, 1, 3), end=date(2026, 1, 3), now=utc(3, 10)
    )

    assert report.rows[0]["clock_out"] == "-"
    assert report.rows[0]["raw_hours"] == "02:00"
    assert report.exceptions == ["Employee 9: entry 3 still open"]


def test_report_summary_per_user_sorted_by_effective_hours():
    rows = [
        closed(1, 5, 8),
        closed(2, 6, 18, flag=FlagStatus.OVER_CAP),
        closed(3, 5, 4),
    ]

    report = CapReportService(FakeTimeEntriesRepo(rows)).build_cap_report(
        start=date(2026, 1, 1), end=date(2026, 1, 7), now=utc(5, 0)
    )

    assert report.summary == [
        {"user_id": 6, "total_raw_hours": "18:00", "total_effective_hours": "16:00", "flagged_entries": 1},
        {"user_id": 5, "total_raw_hours": "12:00", "total_effective_hours": "12:00", "flagged_entries": 0},
    ]


def test_report_forwards_user_id_filter():
    repo = FakeTimeEntriesRepo([])
    svc = CapReportService(repo)

    svc.build_cap_report(start=date(2026, 1, 1), end=date(2026, 1, 31), user_id=123)

    assert repo.last_args["user_id"] == 123
