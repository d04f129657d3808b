from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...time_entries.model import ShiftCapRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_seconds(self, record: ShiftCapRecord, now: datetime) -> int:
        raise NotImplementedError
