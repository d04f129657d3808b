from __future__ import annotations

from datetime import datetime, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.timeclock.timeclock.core.enums import FlagStatus, ShiftState
from src.timeclock.timeclock.core.exceptions import AlreadyClockedInError
from src.timeclock.timeclock.time_entries import soft_cap
from src.timeclock.timeclock.time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository


class FakeCursor:
    def __init__(self, *, rowcount=1, error=None):
        self.rowcount = rowcount
        self.lastrowid = 11
        self.executed = []
        self._error = error

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        if self._error:
            raise self._error

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, cursor: FakeCursor):
        self.conn = FakeConnection(cursor)

    def connect(self, *, with_database: bool = True):
        return self.conn


def entry():
    return soft_cap.new_shift_record(5, datetime(2026, 1, 3, 6, 0, tzinfo=timezone.utc), user_id=7)


def test_save_compares_loaded_flag():
    cur = FakeCursor(rowcount=0)
    repo = MySQLTimeEntryRepository(FakeConnectionFactory(cur))
    record = entry()

    ok = repo.save(
        record,
        expected_state=ShiftState.WORKING,
        expected_anchor=record.last_state_change_at,
        expected_flag=FlagStatus.NONE,
    )

    sql, params = cur.executed[0]
    assert ok is False
    assert sql.endswith("WHERE entry_id=%s AND state=%s AND last_state_change_at <=> %s AND flag_status=%s")
    assert params[-4:] == (5, "WORKING", datetime(2026, 1, 3, 6, 0), "NONE")


def test_save_reports_success_from_rowcount():
    cur = FakeCursor(rowcount=1)
    factory = FakeConnectionFactory(cur)
    record = entry()

    ok = MySQLTimeEntryRepository(factory).save(
        record,
        expected_state=ShiftState.WORKING,
        expected_anchor=record.last_state_change_at,
        expected_flag=FlagStatus.NONE,
    )

    assert ok is True
    assert factory.conn.committed


def test_create_maps_duplicate_open_entry():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeConnectionFactory(FakeCursor(error=dup))

    with pytest.raises(AlreadyClockedInError):
        MySQLTimeEntryRepository(factory).create(entry())

    assert factory.conn.rolled_back


def test_create_reraises_other_integrity_errors():
    other = mysql.connector.IntegrityError(msg="Column cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)
    repo = MySQLTimeEntryRepository(FakeConnectionFactory(FakeCursor(error=other)))

    with pytest.raises(mysql.connector.IntegrityError):
        repo.create(entry())


def test_create_returns_new_id():
    repo = MySQLTimeEntryRepository(FakeConnectionFactory(FakeCursor()))

    assert repo.create(entry()) == 11
