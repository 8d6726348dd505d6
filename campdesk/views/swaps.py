"""Shift swap requests page."""

from __future__ import annotations

from typing import List, Optional

from campdesk.api.client import ApiClient
from campdesk.domain.enums import SwapStatus, SwapTab
from campdesk.domain.models import SwapRequest
from campdesk.errors import ApiError
from campdesk.services import swaps as swap_helpers

from .base import BaseView


class SwapsView(BaseView):
    """
    State of the swap requests page.

    The manager queue tab and approve/reject are only available to
    campground owners and admins, as resolved from the ``whoami`` payload.
    """

    name = "staff-swaps"

    def __init__(
        self,
        client: ApiClient,
        campground_id: str,
        current_user_id: str | None = None,
        whoami: dict | None = None,
    ):
        super().__init__(client, campground_id)
        self.current_user_id = current_user_id
        self.is_manager = swap_helpers.is_manager(whoami, campground_id)
        self.swaps: List[SwapRequest] = []
        self.active_tab = SwapTab.ALL.value

    @property
    def tabs(self) -> List[str]:
        tabs = [SwapTab.ALL.value, SwapTab.INCOMING.value, SwapTab.OUTGOING.value]
        if self.is_manager:
            tabs.append(SwapTab.MANAGER.value)
        return tabs

    @property
    def visible_swaps(self) -> List[SwapRequest]:
        return swap_helpers.filter_swaps(self.swaps, self.active_tab, self.current_user_id)

    @property
    def pending_incoming(self) -> int:
        return swap_helpers.pending_incoming_count(self.swaps, self.current_user_id)

    @property
    def pending_manager(self) -> int:
        return swap_helpers.pending_manager_count(self.swaps)

    def find_swap(self, swap_id: str) -> Optional[SwapRequest]:
        for swap in self.swaps:
            if swap.swap_id == swap_id:
                return swap
        return None

    def can_approve(self, swap: SwapRequest) -> bool:
        return self.is_manager and swap.status == SwapStatus.PENDING_MANAGER.value

    def load_whoami(self) -> None:
        """Resolve the current user and manager rights; a failed lookup leaves a non-manager."""
        try:
            whoami = self.client.whoami()
        except ApiError as e:
            print(f"[WARN] Could not resolve current user: {e}")
            whoami = {}
        user = whoami.get("user") or {}
        if not self.current_user_id:
            self.current_user_id = user.get("id")
        self.is_manager = swap_helpers.is_manager(whoami, self.campground_id)

    def set_tab(self, tab: str) -> None:
        tab = SwapTab(tab).value
        if tab not in self.tabs:
            self.fail("Only managers can view the manager queue")
            return
        self.active_tab = tab

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.swaps = self.client.list_swaps(self.campground_id)
        except ApiError:
            self.fail("Could not load swap requests. Please try again.")
            raise
        finally:
            self.loading = False

    def _act(self, swap_id: str, call, success: str, failure: str) -> None:
        if not self.current_user_id:
            return
        self.clear_messages()
        self.processing.add(swap_id)
        try:
            call()
        except ApiError:
            self.fail(failure)
            raise
        finally:
            self.processing.discard(swap_id)
        self.show_success(success)
        self.load()

    def respond(self, swap_id: str, accept: bool) -> None:
        """Recipient accepts or declines a swap."""
        self._act(
            swap_id,
            lambda: self.client.respond_swap(swap_id, self.current_user_id, accept),
            "Swap accepted! Awaiting manager approval." if accept else "Swap declined.",
            "Could not process response. Please try again.",
        )

    def decide(self, swap_id: str, approve: bool) -> None:
        """Manager approves or rejects a swap awaiting manager approval."""
        if not self.is_manager:
            self.fail("Only managers can approve or reject swaps")
            return
        swap = self.find_swap(swap_id)
        if swap is None or not self.can_approve(swap):
            self.fail("This swap is not awaiting manager approval")
            return
        self._act(
            swap_id,
            lambda: self.client.decide_swap(swap_id, self.current_user_id, approve),
            "Shift swap approved!" if approve else "Shift swap rejected.",
            "Could not process decision. Please try again.",
        )

    def cancel(self, swap_id: str) -> None:
        self._act(
            swap_id,
            lambda: self.client.cancel_swap(swap_id, self.current_user_id),
            "Swap request cancelled.",
            "Could not cancel. Please try again.",
        )
