from __future__ import annotations

from datetime import date, datetime, time, timedelta

HALF_DAY_TYPES = {"반차", "half_day", "오전반차", "오후반차"}

STATUS_PRESENT = "present"
STATUS_LATE = "late"
STATUS_EARLY_LEAVE = "early_leave"
STATUS_ABSENT = "absent"
ATTENDANCE_STATUSES = (STATUS_PRESENT, STATUS_ABSENT, STATUS_LATE, STATUS_EARLY_LEAVE)


def parse_clock(value: str) -> time:
    """'09:05' or '09:05:30' -> time. Raises ValueError on anything else."""
    s = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(s, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time: {value!r} (expected HH:MM)")


def parse_day(value: str) -> date:
    """ISO date; 'YYYY.MM.DD' and 'YYYY/MM/DD' are accepted as well."""
    s = (value or "").strip().replace(".", "-").replace("/", "-")
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"invalid date: {value!r} (expected YYYY-MM-DD)")


def classify_check_in(check_in: str, work_start: str, grace_minutes: int = 0) -> str:
    """late when check_in is strictly after work_start + grace, else present."""
    t_in = parse_clock(check_in)
    start = datetime.combine(date.min, parse_clock(work_start)) + timedelta(minutes=int(grace_minutes or 0))
    return STATUS_LATE if datetime.combine(date.min, t_in) > start else STATUS_PRESENT


def classify_check_out(check_out: str, work_end: str, current_status: str | None) -> str:
    """Leaving before work_end marks early_leave; a late arrival stays late."""
    if current_status == STATUS_LATE:
        return STATUS_LATE
    if parse_clock(check_out) < parse_clock(work_end):
        return STATUS_EARLY_LEAVE
    return STATUS_PRESENT


def worked_minutes(check_in: str | None, check_out: str | None) -> int | None:
    if not check_in or not check_out:
        return None
    t_in = datetime.combine(date.min, parse_clock(check_in))
    t_out = datetime.combine(date.min, parse_clock(check_out))
    if t_out < t_in:
        return None
    return int((t_out - t_in).total_seconds() // 60)


def leave_days(start_date: str, end_date: str, leave_type: str | None = None) -> float:
    """Inclusive calendar days between start and end; half-day leave counts 0.5."""
    start = parse_day(start_date)
    end = parse_day(end_date)
    if end < start:
        raise ValueError("end_date must not be before start_date")
    if (leave_type or "").strip() in HALF_DAY_TYPES:
        return 0.5
    return float((end - start).days + 1)
