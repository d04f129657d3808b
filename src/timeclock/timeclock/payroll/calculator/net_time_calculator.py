from __future__ import annotations

from datetime import datetime

from .base import PayrollCalculator
from ...time_entries import soft_cap
from ...time_entries.model import ShiftCapRecord


class RawHoursCalculator(PayrollCalculator):
    """Audit rule: full net work time, breaks excluded, never capped."""

    def worked_seconds(self, record: ShiftCapRecord, now: datetime) -> int:
        return soft_cap.get_net_work_seconds(record, now)


class EffectiveHoursCalculator(PayrollCalculator):
    """Payroll rule: net work time capped once the entry is flagged OVER_CAP."""

    def worked_seconds(self, record: ShiftCapRecord, now: datetime) -> int:
        return soft_cap.get_effective_net_work_seconds(record, now)
