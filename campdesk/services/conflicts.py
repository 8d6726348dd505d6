"""Overlap detection for staff shifts in a scheduling window."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set

from campdesk.domain.models import Shift

UNKNOWN_USER = "unknown"


def group_shifts_by_day(shifts: Iterable[Shift]) -> Dict[date, List[Shift]]:
    """
    Group shifts by calendar day, keeping input order within each day.

    Shifts without a ``shift_date`` are left out.
    """
    by_day: Dict[date, List[Shift]] = defaultdict(list)
    for shift in shifts:
        if shift.shift_date is None:
            continue
        by_day[shift.shift_date].append(shift)
    return dict(by_day)


def find_shift_conflicts(shifts: Iterable[Shift]) -> Set[str]:
    """
    Flag shifts that overlap another shift of the same person on the same day.

    Within each (day, user) group the shifts that have both a start and an
    end are sorted by start; every adjacent pair where the earlier shift ends
    strictly after the next one starts puts both ids in the result. Touching
    shifts (end == start) are not conflicts. Shifts without a day or without
    times never take part.

    Args:
        shifts: Shifts of the visible window, already in memory

    Returns:
        Set of conflicting shift ids
    """
    conflicts: Set[str] = set()

    for day_shifts in group_shifts_by_day(shifts).values():
        by_user: Dict[str, List[Shift]] = defaultdict(list)
        for shift in day_shifts:
            by_user[shift.user_id or UNKNOWN_USER].append(shift)

        for user_shifts in by_user.values():
            timed = sorted(
                (s for s in user_shifts if s.start_time is not None and s.end_time is not None),
                key=lambda s: s.start_time,
            )
            for current, following in zip(timed, timed[1:]):
                if current.end_time > following.start_time:
                    conflicts.add(current.shift_id)
                    conflicts.add(following.shift_id)

    return conflicts
