from __future__ import annotations

from enum import Enum


class ShiftState(str, Enum):
    """Wall-clock state of an open time entry. CLOCKED_OUT is terminal."""

    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"


class FlagStatus(str, Enum):
    """Soft-cap flag persisted on a time entry. Never reverts to NONE."""

    NONE = "NONE"
    OVER_CAP = "OVER_CAP"
