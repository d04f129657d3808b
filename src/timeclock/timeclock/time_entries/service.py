from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import CAP_REMINDER_OFFSET_MINUTES, DEFAULT_CAP_MINUTES, SECONDS_PER_HOUR
from ..core.enums import FlagStatus, ShiftState
from ..core.exceptions import AlreadyClockedInError, ConcurrentUpdateError, NotFoundError, ValidationError
from . import soft_cap
from .model import ShiftCapRecord
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftStatus:
    """Read-only snapshot of a time entry as of ``as_of``."""

    entry_id: int
    user_id: Optional[int]
    state: ShiftState
    flag_status: FlagStatus
    as_of: datetime
    net_work_seconds: int
    effective_net_work_seconds: int
    cap_seconds: int
    over_cap_live: bool
    approaching_cap: bool
    over_cap_at: Optional[datetime]

    @property
    def net_work_hours(self) -> float:
        return self.net_work_seconds / SECONDS_PER_HOUR

    @property
    def effective_net_work_hours(self) -> float:
        return self.effective_net_work_seconds / SECONDS_PER_HOUR

    @property
    def remaining_seconds(self) -> int:
        return max(self.cap_seconds - self.net_work_seconds, 0)

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "user_id": self.user_id,
            "state": self.state.value,
            "flag_status": self.flag_status.value,
            "as_of": self.as_of.isoformat(),
            "net_work_seconds": self.net_work_seconds,
            "net_work_hours": round(self.net_work_hours, 4),
            "effective_net_work_seconds": self.effective_net_work_seconds,
            "effective_net_work_hours": round(self.effective_net_work_hours, 4),
            "cap_seconds": self.cap_seconds,
            "remaining_seconds": self.remaining_seconds,
            "over_cap_live": self.over_cap_live,
            "approaching_cap": self.approaching_cap,
            "over_cap_at": self.over_cap_at.isoformat() if self.over_cap_at else None,
        }


@dataclass
class SweepResult:
    processed: int = 0
    flagged: list[int] = field(default_factory=list)
    approaching: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "flagged": len(self.flagged),
            "flagged_ids": list(self.flagged),
            "approaching_ids": list(self.approaching),
            "failed_ids": list(self.failed),
        }


def _persist(entries: TimeEntryRepository, before: ShiftCapRecord, after: ShiftCapRecord) -> None:
    ok = entries.save(
        after,
        expected_state=before.state,
        expected_anchor=before.last_state_change_at,
        expected_flag=before.flag_status,
    )
    if not ok:
        logger.warning("entry %s: concurrent update detected, change discarded", after.id)
        raise ConcurrentUpdateError("Time entry was changed by another request, please retry")


class TimeClockService:
    """Clock-event handlers: load the entry, run one engine transition, save it."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        *,
        cap_minutes: int = DEFAULT_CAP_MINUTES,
        reminder_minutes: int = CAP_REMINDER_OFFSET_MINUTES,
    ):
        self._entries = entries
        self._cap_minutes = int(cap_minutes)
        self._reminder_minutes = int(reminder_minutes)

    def _load(self, entry_id: int) -> ShiftCapRecord:
        record = self._entries.get_by_id(int(entry_id))
        if not record:
            raise NotFoundError(f"Time entry {entry_id} not found")
        return record

    def _transition(
        self,
        entry_id: int,
        *,
        allowed: tuple[ShiftState, ...],
        error: str,
        action: Callable[[ShiftCapRecord, datetime], ShiftCapRecord],
        now: Optional[datetime],
    ) -> ShiftCapRecord:
        now = now or now_utc()
        before = self._load(entry_id)
        if before.state not in allowed:
            logger.warning("entry %s: rejected %s in state %s", before.id, action.__name__, before.state.value)
            raise ValidationError(error)

        after = action(replace(before), now)
        _persist(self._entries, before, after)
        logger.info(
            "entry %s: %s -> %s (net %ss, flag %s)",
            after.id,
            before.state.value,
            after.state.value,
            after.work_accum_seconds,
            after.flag_status.value,
        )
        return after

    def clock_in(self, user_id: int, *, now: Optional[datetime] = None, cap_minutes: Optional[int] = None) -> ShiftCapRecord:
        now = now or now_utc()
        if cap_minutes is not None and int(cap_minutes) <= 0:
            raise ValidationError("cap_minutes must be a positive number of minutes")

        if self._entries.get_open_for_user(int(user_id)):
            raise AlreadyClockedInError("User is already clocked in")

        record = soft_cap.new_shift_record(
            0,
            now,
            cap_minutes=int(cap_minutes) if cap_minutes is not None else self._cap_minutes,
            user_id=int(user_id),
        )
        record.id = self._entries.create(record)
        logger.info("entry %s: user %s clocked in (cap %s min)", record.id, user_id, record.cap_minutes)
        return record

    def start_break(self, entry_id: int, *, now: Optional[datetime] = None) -> ShiftCapRecord:
        return self._transition(
            entry_id,
            allowed=(ShiftState.WORKING,),
            error="A break can only start while working",
            action=soft_cap.prepare_start_break,
            now=now,
        )

    def end_break(self, entry_id: int, *, now: Optional[datetime] = None) -> ShiftCapRecord:
        return self._transition(
            entry_id,
            allowed=(ShiftState.ON_BREAK,),
            error="No break in progress",
            action=soft_cap.prepare_end_break,
            now=now,
        )

    def clock_out(self, entry_id: int, *, now: Optional[datetime] = None) -> ShiftCapRecord:
        return self._transition(
            entry_id,
            allowed=(ShiftState.WORKING, ShiftState.ON_BREAK),
            error="Time entry is already clocked out",
            action=soft_cap.prepare_clock_out,
            now=now,
        )

    def get_status(self, entry_id: int, *, now: Optional[datetime] = None) -> ShiftStatus:
        now = now or now_utc()
        record = self._load(entry_id)
        return ShiftStatus(
            entry_id=record.id,
            user_id=record.user_id,
            state=record.state,
            flag_status=record.flag_status,
            as_of=now,
            net_work_seconds=soft_cap.get_net_work_seconds(record, now),
            effective_net_work_seconds=soft_cap.get_effective_net_work_seconds(record, now),
            cap_seconds=soft_cap.get_cap_seconds(record),
            over_cap_live=soft_cap.is_over_cap(record, now),
            approaching_cap=soft_cap.is_approaching_cap(record, now, self._reminder_minutes),
            over_cap_at=record.over_cap_at,
        )


class SoftCapEvaluationService:
    """Periodic sweep over open entries so the flag lands between clock actions."""

    def __init__(self, entries: TimeEntryRepository, *, reminder_minutes: int = CAP_REMINDER_OFFSET_MINUTES):
        self._entries = entries
        self._reminder_minutes = int(reminder_minutes)

    def evaluate_open_entries(self, *, now: Optional[datetime] = None) -> SweepResult:
        now = now or now_utc()
        result = SweepResult()

        for before in self._entries.list_open():
            result.processed += 1
            if soft_cap.is_approaching_cap(before, now, self._reminder_minutes):
                result.approaching.append(before.id)

            after = soft_cap.apply_soft_cap_flag(replace(before), now)
            if after.flag_status == before.flag_status:
                continue

            try:
                _persist(self._entries, before, after)
            except ConcurrentUpdateError:
                # A clock action won the race; the next sweep sees the new state.
                result.failed.append(before.id)
                continue
            result.flagged.append(after.id)
            logger.info("entry %s: flagged over cap (crossed at %s)", after.id, after.over_cap_at)

        logger.info(
            "soft cap sweep: processed=%d flagged=%d approaching=%d failed=%d",
            result.processed,
            len(result.flagged),
            len(result.approaching),
            len(result.failed),
        )
        return result
