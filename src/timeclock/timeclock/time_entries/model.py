from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_CAP_MINUTES
from ..core.enums import FlagStatus, ShiftState


@dataclass(frozen=True)
class CapFields:
    """Cap-tracking fields seeded on a new time entry at clock-in."""

    state: ShiftState
    work_accum_seconds: int
    last_state_change_at: Optional[datetime]
    cap_minutes: int
    flag_status: FlagStatus
    over_cap_at: Optional[datetime]


@dataclass
class ShiftCapRecord:
    """Domain entity: one employee shift with soft-cap accounting.

    Mutable on purpose: the engine functions in ``soft_cap`` fold time into
    the record in place. The repository loads and saves it whole.
    """

    id: int
    clock_in: datetime
    clock_out: Optional[datetime] = None
    state: ShiftState = ShiftState.WORKING
    work_accum_seconds: int = 0
    last_state_change_at: Optional[datetime] = None
    cap_minutes: int = DEFAULT_CAP_MINUTES
    flag_status: FlagStatus = FlagStatus.NONE
    over_cap_at: Optional[datetime] = None
    user_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.state != ShiftState.CLOCKED_OUT

    @property
    def is_over_cap_flagged(self) -> bool:
        return self.flag_status == FlagStatus.OVER_CAP
