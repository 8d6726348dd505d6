"""Swap request list filtering and counters."""

from __future__ import annotations

from typing import Iterable, List

from campdesk.domain.enums import SwapStatus, SwapTab
from campdesk.domain.models import SwapRequest

MANAGER_ROLES = {"owner", "admin"}


def filter_swaps(swaps: Iterable[SwapRequest], tab: str, user_id: str | None) -> List[SwapRequest]:
    """
    Swaps shown under a tab.

    Args:
        swaps: All swap requests of the campground
        tab: One of ``all``, ``incoming``, ``outgoing``, ``manager``
        user_id: Current user; without one the full list is shown

    Returns:
        Filtered list in input order
    """
    swaps = list(swaps)
    if not user_id:
        return swaps
    tab = SwapTab(tab)
    if tab == SwapTab.INCOMING:
        return [s for s in swaps if s.recipient_id == user_id]
    if tab == SwapTab.OUTGOING:
        return [s for s in swaps if s.requester_id == user_id]
    if tab == SwapTab.MANAGER:
        return [s for s in swaps if s.status == SwapStatus.PENDING_MANAGER.value]
    return swaps


def pending_incoming_count(swaps: Iterable[SwapRequest], user_id: str | None) -> int:
    return sum(
        1 for s in swaps
        if s.recipient_id == user_id and s.status == SwapStatus.PENDING_RECIPIENT.value
    )


def pending_manager_count(swaps: Iterable[SwapRequest]) -> int:
    return sum(1 for s in swaps if s.status == SwapStatus.PENDING_MANAGER.value)


def is_manager(whoami: dict | None, campground_id: str) -> bool:
    """Owner/admin platform role, or owner/admin membership of this campground."""
    user = (whoami or {}).get("user") or {}
    if MANAGER_ROLES & set(user.get("ownershipRoles") or []):
        return True
    for membership in user.get("memberships") or []:
        if membership.get("campgroundId") == campground_id:
            return membership.get("role") in MANAGER_ROLES
    return False
