from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import from_naive_utc, to_naive_utc
from ..core.enums import FlagStatus, ShiftState
from ..core.exceptions import AlreadyClockedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ShiftCapRecord
from .repository import TimeEntryRepository

_COLUMNS = """
    entry_id, user_id, clock_in, clock_out, state, work_accum_seconds,
    last_state_change_at, cap_minutes, flag_status, over_cap_at
"""


def _to_record(r: Dict[str, Any]) -> ShiftCapRecord:
    return ShiftCapRecord(
        id=int(r["entry_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        clock_in=from_naive_utc(r["clock_in"]),
        clock_out=from_naive_utc(r.get("clock_out")),
        state=ShiftState(r["state"]),
        work_accum_seconds=int(r.get("work_accum_seconds") or 0),
        last_state_change_at=from_naive_utc(r.get("last_state_change_at")),
        cap_minutes=int(r["cap_minutes"]),
        flag_status=FlagStatus(r["flag_status"]),
        over_cap_at=from_naive_utc(r.get("over_cap_at")),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[ShiftCapRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_user(self, user_id: int) -> Optional[ShiftCapRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE user_id=%s AND state <> %s
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (int(user_id), ShiftState.CLOCKED_OUT.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_open(self) -> Sequence[ShiftCapRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE state <> %s ORDER BY clock_in ASC",
                (ShiftState.CLOCKED_OUT.value,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[ShiftCapRecord]:
        clauses = ["clock_in >= %s", "clock_in < %s"]
        params: list[object] = [
            datetime.combine(start_date, time.min),
            datetime.combine(end_date + timedelta(days=1), time.min),
        ]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE {where} ORDER BY clock_in DESC, entry_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: ShiftCapRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(
                        user_id, clock_in, clock_out, state, work_accum_seconds,
                        last_state_change_at, cap_minutes, flag_status, over_cap_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        to_naive_utc(record.clock_in),
                        to_naive_utc(record.clock_out),
                        record.state.value,
                        int(record.work_accum_seconds),
                        to_naive_utc(record.last_state_change_at),
                        int(record.cap_minutes),
                        record.flag_status.value,
                        to_naive_utc(record.over_cap_at),
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise AlreadyClockedInError("User is already clocked in") from e
            raise

    def save(
        self,
        record: ShiftCapRecord,
        *,
        expected_state: ShiftState,
        expected_anchor: Optional[datetime],
        expected_flag: FlagStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET clock_out=%s, state=%s, work_accum_seconds=%s, last_state_change_at=%s,
                    flag_status=%s, over_cap_at=%s
                WHERE entry_id=%s AND state=%s AND last_state_change_at <=> %s AND flag_status=%s
                """,
                (
                    to_naive_utc(record.clock_out),
                    record.state.value,
                    int(record.work_accum_seconds),
                    to_naive_utc(record.last_state_change_at),
                    record.flag_status.value,
                    to_naive_utc(record.over_cap_at),
                    int(record.id),
                    expected_state.value,
                    to_naive_utc(expected_anchor),
                    expected_flag.value,
                ),
            )
            return cur.rowcount > 0
