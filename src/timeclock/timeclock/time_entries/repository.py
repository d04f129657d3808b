from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import FlagStatus, ShiftState
from .model import ShiftCapRecord


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[ShiftCapRecord]:
        raise NotImplementedError

    def get_open_for_user(self, user_id: int) -> Optional[ShiftCapRecord]:
        raise NotImplementedError

    def list_open(self) -> Sequence[ShiftCapRecord]:
        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[ShiftCapRecord]:
        raise NotImplementedError

    def create(self, record: ShiftCapRecord) -> int:
        """Insert a new entry and return its id.

        Raises AlreadyClockedInError when the user already has an open entry.
        """

        raise NotImplementedError

    def save(
        self,
        record: ShiftCapRecord,
        *,
        expected_state: ShiftState,
        expected_anchor: Optional[datetime],
        expected_flag: FlagStatus,
    ) -> bool:
        """Write the whole record back if it is still in the loaded state.

        Compare-and-swap on (state, last_state_change_at, flag_status) as
        loaded. Returns False when another writer got there first, including
        a sweep that flagged the entry in between.
        """

        raise NotImplementedError
