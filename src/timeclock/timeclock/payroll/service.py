from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_hhmm, now_utc
from ..time_entries.repository import TimeEntryRepository
from .calculator.base import PayrollCalculator
from .calculator.net_time_calculator import EffectiveHoursCalculator, RawHoursCalculator


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    exceptions: list[str]


class CapReportService:
    """Per-entry raw vs effective hours plus an exceptions list for payroll review."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        *,
        raw_calculator: Optional[PayrollCalculator] = None,
        effective_calculator: Optional[PayrollCalculator] = None,
    ):
        self._entries = entries
        self._raw = raw_calculator or RawHoursCalculator()
        self._effective = effective_calculator or EffectiveHoursCalculator()

    def build_cap_report(
        self,
        *,
        start: date,
        end: date,
        now: Optional[datetime] = None,
        user_id: Optional[int] = None,
    ) -> ReportData:
        now = now or now_utc()
        records = self._entries.list_for_range(start_date=start, end_date=end, user_id=user_id)

        summary_map: dict[Optional[int], dict] = {}
        out_rows: list[dict] = []
        exceptions: list[str] = []

        for r in records:
            raw_seconds = self._raw.worked_seconds(r, now)
            effective_seconds = self._effective.worked_seconds(r, now)
            employee = f"Employee {r.user_id}" if r.user_id is not None else f"Entry {r.id}"

            out_rows.append(
                {
                    "entry_id": r.id,
                    "user_id": r.user_id,
                    "work_date": r.clock_in.strftime("%Y-%m-%d"),
                    "clock_in": r.clock_in.strftime("%H:%M"),
                    "clock_out": r.clock_out.strftime("%H:%M") if r.clock_out else "-",
                    "state": r.state.value,
                    "raw_hours": format_hhmm(raw_seconds),
                    "effective_hours": format_hhmm(effective_seconds),
                    "flag_status": r.flag_status.value,
                    "over_cap_at": r.over_cap_at.isoformat() if r.over_cap_at else None,
                }
            )

            if r.is_over_cap_flagged:
                exceptions.append(f"{employee}: over {r.cap_minutes / 60:g}-hour cap flagged")
            if r.is_open:
                exceptions.append(f"{employee}: entry {r.id} still open")

            s = summary_map.get(r.user_id)
            if not s:
                s = {"user_id": r.user_id, "raw_seconds": 0, "effective_seconds": 0, "flagged": 0}
                summary_map[r.user_id] = s
            s["raw_seconds"] += raw_seconds
            s["effective_seconds"] += effective_seconds
            s["flagged"] += int(r.is_over_cap_flagged)

        summary = [
            {
                "user_id": s["user_id"],
                "total_raw_hours": format_hhmm(s["raw_seconds"]),
                "total_effective_hours": format_hhmm(s["effective_seconds"]),
                "flagged_entries": s["flagged"],
            }
            for s in sorted(summary_map.values(), key=lambda x: x["effective_seconds"], reverse=True)
        ]

        return ReportData(rows=out_rows, summary=summary, exceptions=exceptions)
