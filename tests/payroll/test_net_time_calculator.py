from datetime import datetime, timezone

from src.timeclock.timeclock.core.enums import FlagStatus, ShiftState
from src.timeclock.timeclock.payroll.calculator.net_time_calculator import EffectiveHoursCalculator, RawHoursCalculator
from src.timeclock.timeclock.time_entries.model import ShiftCapRecord

NOW = datetime(2026, 1, 4, 12, 0, tzinfo=timezone.utc)


def closed_entry(hours: int, flag: FlagStatus) -> ShiftCapRecord:
    return ShiftCapRecord(
        id=1,
        clock_in=datetime(2026, 1, 3, 6, 0, tzinfo=timezone.utc),
        clock_out=datetime(2026, 1, 4, 6, 0, tzinfo=timezone.utc),
        state=ShiftState.CLOCKED_OUT,
        work_accum_seconds=hours * 3600,
        last_state_change_at=datetime(2026, 1, 4, 6, 0, tzinfo=timezone.utc),
        flag_status=flag,
    )


def test_raw_calculator_is_never_capped():
    row = closed_entry(20, FlagStatus.OVER_CAP)

    assert RawHoursCalculator().worked_seconds(row, NOW) == 20 * 3600


def test_effective_calculator_caps_flagged_entry():
    row = closed_entry(20, FlagStatus.OVER_CAP)

    assert EffectiveHoursCalculator().worked_seconds(row, NOW) == 16 * 3600


def test_effective_calculator_needs_persisted_flag():
    row = closed_entry(20, FlagStatus.NONE)

    assert EffectiveHoursCalculator().worked_seconds(row, NOW) == 20 * 3600


def test_calculators_agree_under_cap():
    row = closed_entry(9, FlagStatus.NONE)

    assert RawHoursCalculator().worked_seconds(row, NOW) == EffectiveHoursCalculator().worked_seconds(row, NOW)
