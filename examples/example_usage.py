"""Example: drive the soft-cap engine directly, without Flask or MySQL.

Clock in 06:00, work to 21:00, break to 23:00, work to 00:00:
18h on the wall clock, 16h of net work, flagged exactly at the cap.
"""

from datetime import datetime, timezone

from src.timeclock.timeclock.time_entries import soft_cap


def t(hour: int, day: int = 3) -> datetime:
    return datetime(2026, 1, day, hour, 0, tzinfo=timezone.utc)


def main():
    entry = soft_cap.new_shift_record(1, t(6), user_id=7)
    soft_cap.prepare_start_break(entry, t(21))
    soft_cap.prepare_end_break(entry, t(23))
    soft_cap.apply_soft_cap_flag(entry, t(23))
    print("after break:", entry.flag_status.value, soft_cap.get_net_work_hours(entry, t(23)))

    soft_cap.prepare_clock_out(entry, t(0, day=4))
    print("clocked out:", entry.flag_status.value, entry.over_cap_at)
    print("raw hours:", soft_cap.get_net_work_hours(entry, t(0, day=4)))
    print("effective hours:", soft_cap.get_effective_net_work_hours(entry, t(0, day=4)))


if __name__ == "__main__":
    main()
