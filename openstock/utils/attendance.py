# openstock/utils/attendance.py
STANDARD_WORKDAY_MINUTES = 8 * 60


class AttendanceError(ValueError):
    pass


def parse_hhmm(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` string."""
    try:
        hours, minutes = (int(part) for part in value.split(":")[:2])
    except (AttributeError, ValueError):
        raise AttendanceError(f"Bad time format: {value!r} (expected HH:MM)")
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise AttendanceError(f"Bad time format: {value!r} (expected HH:MM)")
    return hours * 60 + minutes


def worked_minutes(clock_in: str, clock_out: str, break_minutes: int = 0) -> int:
    start = parse_hhmm(clock_in)
    end = parse_hhmm(clock_out)
    # Both times belong to the same calendar day
    if end < start:
        raise AttendanceError("Clock-out is earlier than clock-in; shifts spanning midnight are not supported")
    return end - start - (break_minutes or 0)


def overtime_minutes(
    clock_in: str,
    clock_out: str,
    break_minutes: int = 0,
    standard_minutes: int = STANDARD_WORKDAY_MINUTES,
) -> int:
    return max(0, worked_minutes(clock_in, clock_out, break_minutes) - standard_minutes)
