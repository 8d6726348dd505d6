"""Shift helpers for the scheduling board: durations, moves, staff lookup."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from campdesk.data_io import clock_string, day_string, parse_day
from campdesk.domain.enums import SHIFT_TRANSITIONS, ShiftStatus
from campdesk.domain.forms import ShiftForm
from campdesk.domain.models import Shift, StaffMember

DEFAULT_WINDOW_DAYS = 21
STAFF_PICKER_LIMIT = 10


def schedule_window(start: date, days: int = DEFAULT_WINDOW_DAYS) -> Tuple[date, date]:
    """Return the ``[start, end)`` bounds of a scheduling window."""
    if days <= 0:
        raise ValueError(f"Window length must be positive, got {days}")
    return start, start + timedelta(days=days)


def status_filter_options() -> List[str]:
    return ["all"] + [s.value for s in ShiftStatus]


def duration_minutes(shift: Shift) -> int:
    """Whole minutes from start to end; 0 when a bound is missing or reversed."""
    if shift.start_time is None or shift.end_time is None:
        return 0
    minutes = round((shift.end_time - shift.start_time).total_seconds() / 60)
    return max(0, minutes)


def format_duration(minutes: Optional[int]) -> Optional[str]:
    """
    Format minutes as ``"8h 30m"``; the minute part is dropped when zero.

    Returns None for missing or zero durations.
    """
    if not minutes:
        return None
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {f'{mins}m' if mins > 0 else ''}".strip()


def pending_approval_count(shifts: Iterable[Shift]) -> int:
    return sum(1 for s in shifts if s.status == ShiftStatus.SUBMITTED.value)


def can_transition(shift: Shift, target: ShiftStatus) -> bool:
    try:
        current = ShiftStatus(shift.status or ShiftStatus.SCHEDULED.value)
    except ValueError:
        return False
    return target in SHIFT_TRANSITIONS[current]


def can_submit(shift: Shift) -> bool:
    return can_transition(shift, ShiftStatus.SUBMITTED)


def can_decide(shift: Shift) -> bool:
    """Whether a manager may approve or reject the shift."""
    return can_transition(shift, ShiftStatus.APPROVED)


def member_display_name(member: StaffMember) -> str:
    return member.full_name or member.email or f"#{member.member_id}"


def filter_staff(members: Iterable[StaffMember], query: str = "", limit: int = STAFF_PICKER_LIMIT) -> List[StaffMember]:
    """
    Staff picker search: case-insensitive match on full name or email.

    An empty query returns the first ``limit`` members.
    """
    members = list(members)
    q = (query or "").strip().lower()
    if not q:
        return members[:limit]
    matches = [
        m for m in members
        if q in f"{m.first_name or ''} {m.last_name or ''}".lower() or q in (m.email or "").lower()
    ]
    return matches[:limit]


def swap_recipients(members: Iterable[StaffMember], shift: Shift) -> List[StaffMember]:
    """Everyone except the shift owner."""
    return [m for m in members if m.member_id != shift.user_id]


def members_by_id(members: Iterable[StaffMember]) -> Dict[str, StaffMember]:
    return {m.member_id: m for m in members}


def move_by_days_payload(shift: Shift, delta_days: int) -> Optional[dict]:
    """PATCH payload moving a shift by whole days; None when it has no date."""
    if shift.shift_date is None:
        return None
    return {"shiftDate": day_string(shift.shift_date + timedelta(days=delta_days))}


def move_time_payload(shift: Shift, delta_minutes: int) -> Optional[dict]:
    """PATCH payload moving start and end by the same number of minutes."""
    if shift.shift_date is None or shift.start_time is None or shift.end_time is None:
        return None
    delta = timedelta(minutes=delta_minutes)
    return {
        "shiftDate": day_string(shift.shift_date),
        "startTime": clock_string(shift.start_time + delta),
        "endTime": clock_string(shift.end_time + delta),
    }


def drop_on_day_payload(shift: Shift, day) -> Optional[dict]:
    """PATCH payload for dropping a shift on a calendar day; None if it is already there."""
    target = parse_day(day)
    if target is None or shift.shift_date == target:
        return None
    return {"shiftDate": day_string(target)}


def drop_on_hour_payload(shift: Shift, day, hour: int) -> Optional[dict]:
    """
    PATCH payload for dropping a shift on an hour slot, keeping its duration.

    Raises:
        ValueError: If hour is outside 0-23
    """
    if not 0 <= int(hour) <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    target = parse_day(day)
    if target is None:
        return None
    start = datetime(target.year, target.month, target.day, int(hour))
    end = start + timedelta(minutes=duration_minutes(shift))
    return {
        "shiftDate": day_string(target),
        "startTime": clock_string(start),
        "endTime": clock_string(end),
    }


def duplicate_to_form(shift: Shift) -> ShiftForm:
    """Prefill the new-shift form from an existing shift."""
    return ShiftForm(
        user_id=shift.user_id or "",
        date=day_string(shift.shift_date) or "",
        start=clock_string(shift.start_time) or "09:00",
        end=clock_string(shift.end_time) or "17:00",
        role=shift.role or "",
    )
