"""Net work time and soft-cap accounting for a single time entry.

Pure functions over a ``ShiftCapRecord``. No I/O, no clock reads: every
function takes ``now`` explicitly so results are deterministic.

Net work time excludes breaks. Only two numbers are persisted for it:
``work_accum_seconds`` (time already banked) and ``last_state_change_at``
(the anchor the live segment is measured from while WORKING). Every
transition first settles the live segment into the bank, then switches
state.

The soft cap only flags, it never clocks anyone out. Payroll consumers read
the effective (capped) duration, which is capped only once the OVER_CAP flag
has been persisted by ``apply_soft_cap_flag``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import elapsed_seconds
from ..core.constants import (
    CAP_REMINDER_OFFSET_MINUTES,
    DEFAULT_CAP_MINUTES,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)
from ..core.enums import FlagStatus, ShiftState
from .model import CapFields, ShiftCapRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def create_initial_cap_fields(clock_in: datetime, cap_minutes: Optional[int] = None) -> CapFields:
    """Cap-tracking fields for a new entry clocked in at ``clock_in``.

    ``cap_minutes`` must be a positive integer; it is not validated here.
    """
    return CapFields(
        state=ShiftState.WORKING,
        work_accum_seconds=0,
        last_state_change_at=clock_in,
        cap_minutes=DEFAULT_CAP_MINUTES if cap_minutes is None else cap_minutes,
        flag_status=FlagStatus.NONE,
        over_cap_at=None,
    )


def new_shift_record(
    entry_id: int,
    clock_in: datetime,
    *,
    cap_minutes: Optional[int] = None,
    user_id: Optional[int] = None,
) -> ShiftCapRecord:
    fields = create_initial_cap_fields(clock_in, cap_minutes)
    return ShiftCapRecord(
        id=entry_id,
        clock_in=clock_in,
        clock_out=None,
        state=fields.state,
        work_accum_seconds=fields.work_accum_seconds,
        last_state_change_at=fields.last_state_change_at,
        cap_minutes=fields.cap_minutes,
        flag_status=fields.flag_status,
        over_cap_at=fields.over_cap_at,
        user_id=user_id,
    )


# ---------------------------------------------------------------------------
# Segment accumulator
# ---------------------------------------------------------------------------


def settle_work(record: ShiftCapRecord, now: datetime) -> ShiftCapRecord:
    """Bank the live segment up to ``now`` and re-anchor on ``now``.

    Time is added only while WORKING with a known anchor. The anchor moves
    to ``now`` in every case.
    """
    if record.state == ShiftState.WORKING and record.last_state_change_at is not None:
        added = elapsed_seconds(record.last_state_change_at, now)
        record.work_accum_seconds += added
        logger.debug("entry %s: settled %ss (total %ss)", record.id, added, record.work_accum_seconds)
    record.last_state_change_at = now
    return record


# ---------------------------------------------------------------------------
# Queries (never mutate the record)
# ---------------------------------------------------------------------------


def get_net_work_seconds(record: ShiftCapRecord, now: datetime) -> int:
    """Net work time as of ``now``, breaks excluded."""
    if record.state == ShiftState.WORKING and record.last_state_change_at is not None:
        return record.work_accum_seconds + elapsed_seconds(record.last_state_change_at, now)
    return record.work_accum_seconds


def get_net_work_hours(record: ShiftCapRecord, now: datetime) -> float:
    return get_net_work_seconds(record, now) / SECONDS_PER_HOUR


def get_cap_seconds(record: ShiftCapRecord) -> int:
    return record.cap_minutes * SECONDS_PER_MINUTE


def is_over_cap(record: ShiftCapRecord, now: datetime) -> bool:
    """Live check, independent of the persisted flag."""
    return get_net_work_seconds(record, now) >= get_cap_seconds(record)


def is_approaching_cap(
    record: ShiftCapRecord,
    now: datetime,
    reminder_minutes: int = CAP_REMINDER_OFFSET_MINUTES,
) -> bool:
    """True inside the reminder window before the cap, never once flagged."""
    if record.flag_status == FlagStatus.OVER_CAP:
        return False
    remaining = get_cap_seconds(record) - get_net_work_seconds(record, now)
    return 0 < remaining <= reminder_minutes * SECONDS_PER_MINUTE


def get_effective_net_work_seconds(record: ShiftCapRecord, now: datetime) -> int:
    """Net work time for payroll: capped only when OVER_CAP is persisted.

    An entry past the cap whose flag has not been applied yet is returned
    uncapped. Callers that need capping must run ``apply_soft_cap_flag`` first.
    """
    net = get_net_work_seconds(record, now)
    if record.flag_status == FlagStatus.OVER_CAP:
        return min(net, get_cap_seconds(record))
    return net


def get_effective_net_work_hours(record: ShiftCapRecord, now: datetime) -> float:
    return get_effective_net_work_seconds(record, now) / SECONDS_PER_HOUR


def calculate_duration_hours(record: ShiftCapRecord) -> float:
    """Stored net duration of a closed entry (banked seconds only)."""
    return record.work_accum_seconds / SECONDS_PER_HOUR


# ---------------------------------------------------------------------------
# Cap evaluator
# ---------------------------------------------------------------------------


def compute_over_cap_at(record: ShiftCapRecord, now: datetime) -> Optional[datetime]:
    """Instant net work first reached the cap, or None if not reached yet.

    Exact while WORKING: everything before the live segment is frozen in
    ``work_accum_seconds`` and the live segment runs linearly from the anchor.
    Once the crossing segment has been settled and closed, the pre-segment
    subtotal is gone and the anchor is the best timestamp left.
    """
    cap_seconds = get_cap_seconds(record)
    if get_net_work_seconds(record, now) < cap_seconds:
        return None

    anchor = record.last_state_change_at
    if record.state == ShiftState.WORKING and anchor is not None:
        remaining = cap_seconds - record.work_accum_seconds
        if remaining <= 0:
            # Already past the cap when this segment started.
            return anchor
        return anchor + timedelta(seconds=remaining)
    return anchor


def apply_soft_cap_flag(record: ShiftCapRecord, now: datetime) -> ShiftCapRecord:
    """Persist OVER_CAP the first time net work reaches the cap.

    Idempotent: a flagged record, and its ``over_cap_at``, are left untouched.
    """
    if record.flag_status == FlagStatus.OVER_CAP:
        return record
    if get_net_work_seconds(record, now) < get_cap_seconds(record):
        return record

    record.flag_status = FlagStatus.OVER_CAP
    if record.over_cap_at is None:
        record.over_cap_at = compute_over_cap_at(record, now) or now
    logger.debug("entry %s: flagged OVER_CAP at %s", record.id, record.over_cap_at)
    return record


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _is_closed(record: ShiftCapRecord, action: str) -> bool:
    if record.state == ShiftState.CLOCKED_OUT:
        logger.warning("entry %s: %s ignored, entry is clocked out", record.id, action)
        return True
    return False


def prepare_start_break(record: ShiftCapRecord, now: datetime) -> ShiftCapRecord:
    if _is_closed(record, "start break"):
        return record
    settle_work(record, now)
    record.state = ShiftState.ON_BREAK
    return record


def prepare_end_break(record: ShiftCapRecord, now: datetime) -> ShiftCapRecord:
    if _is_closed(record, "end break"):
        return record
    # Nothing is banked while on break; this only moves the anchor.
    settle_work(record, now)
    record.state = ShiftState.WORKING
    return record


def prepare_clock_out(record: ShiftCapRecord, now: datetime) -> ShiftCapRecord:
    """Close the entry and evaluate the cap against the final total.

    The cap is checked once against the live segment before settling, so a
    crossing inside the closing segment gets its exact timestamp.
    """
    if _is_closed(record, "clock out"):
        return record
    if record.state == ShiftState.WORKING:
        apply_soft_cap_flag(record, now)
    settle_work(record, now)
    record.state = ShiftState.CLOCKED_OUT
    record.clock_out = now
    apply_soft_cap_flag(record, now)
    return record
