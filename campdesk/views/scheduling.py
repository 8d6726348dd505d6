"""Staff scheduling board: a 21-day window of shifts with conflict flags."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, timedelta
from typing import Dict, List, Optional, Set

from campdesk.api.client import ApiClient
from campdesk.domain.forms import ShiftForm
from campdesk.domain.models import Shift, StaffMember, StaffRole
from campdesk.errors import ApiError, InvalidTransitionError
from campdesk.services import shifts as shift_helpers
from campdesk.services.conflicts import find_shift_conflicts, group_shifts_by_day

from .base import BaseView

WINDOW_STEP_DAYS = 7


class SchedulingView(BaseView):
    """
    State of the staff scheduling page.

    Holds the shifts of the visible window plus roles, members, the new-shift
    form and drag state. Derived values (conflicts, day grouping, counters)
    are recomputed from ``shifts`` on every access.
    """

    name = "staff-scheduling"

    def __init__(
        self,
        client: ApiClient,
        campground_id: str,
        current_user_id: str | None = None,
        window_start: date | None = None,
        window_days: int = shift_helpers.DEFAULT_WINDOW_DAYS,
    ):
        super().__init__(client, campground_id)
        if window_days <= 0:
            raise ValueError(f"Window length must be positive, got {window_days}")
        self.current_user_id = current_user_id
        self.window_start = window_start or date.today()
        self.window_days = window_days
        self.status_filter = "all"
        self.shifts: List[Shift] = []
        self.roles: List[StaffRole] = []
        self.members: List[StaffMember] = []
        self.form = ShiftForm()
        self.staff_search = ""
        self.drag_shift_id: str | None = None

    # --- derived values ---

    @property
    def window_end(self) -> date:
        return shift_helpers.schedule_window(self.window_start, self.window_days)[1]

    @property
    def conflicts(self) -> Set[str]:
        return find_shift_conflicts(self.shifts)

    @property
    def grouped_by_day(self) -> Dict[date, List[Shift]]:
        return group_shifts_by_day(self.shifts)

    @property
    def total_shifts(self) -> int:
        return len(self.shifts)

    @property
    def pending_approval_count(self) -> int:
        return shift_helpers.pending_approval_count(self.shifts)

    @property
    def filtered_staff(self) -> List[StaffMember]:
        return shift_helpers.filter_staff(self.members, self.staff_search)

    @property
    def selected_staff(self) -> Optional[StaffMember]:
        return shift_helpers.members_by_id(self.members).get(self.form.user_id)

    def find_shift(self, shift_id: str) -> Optional[Shift]:
        for shift in self.shifts:
            if shift.shift_id == shift_id:
                return shift
        return None

    def swap_recipients(self, shift_id: str) -> List[StaffMember]:
        shift = self.find_shift(shift_id)
        if shift is None:
            return []
        return shift_helpers.swap_recipients(self.members, shift)

    # --- loading ---

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.shifts = self.client.list_shifts(
                self.campground_id, self.window_start, self.window_end, self.status_filter
            )
            print(f"[INFO] Loaded {len(self.shifts)} shifts for {self.window_start} - {self.window_end}")
        except ApiError:
            self.fail("Unable to load shifts. Please retry.")
            raise
        finally:
            self.loading = False

    def load_roles(self) -> None:
        """Load roles and members; either list falls back to empty on failure."""
        try:
            self.roles = self.client.list_roles(self.campground_id)
        except ApiError as e:
            print(f"[WARN] Could not load staff roles: {e}")
            self.roles = []
        try:
            self.members = self.client.list_members(self.campground_id)
        except ApiError as e:
            print(f"[WARN] Could not load campground members: {e}")
            self.members = []
        if not self.form.role and self.roles:
            self.form.role = self.roles[0].name

    def set_status_filter(self, status: str) -> None:
        if status not in shift_helpers.status_filter_options():
            raise ValueError(f"Unknown shift status filter: {status}")
        self.status_filter = status
        self.load()

    def next_window(self) -> None:
        self.window_start += timedelta(days=WINDOW_STEP_DAYS)
        self.load()

    def previous_window(self) -> None:
        self.window_start -= timedelta(days=WINDOW_STEP_DAYS)
        self.load()

    def jump_to_today(self, today: date | None = None) -> None:
        self.window_start = today or date.today()
        self.load()

    # --- mutations ---

    @contextmanager
    def _processing(self, shift_id: str):
        self.clear_messages()
        self.processing.add(shift_id)
        try:
            yield
        finally:
            self.processing.discard(shift_id)

    def create_shift(self) -> None:
        """
        Create a shift from the form, then reset the date/person and reload.

        Raises:
            ValueError: If the form is missing a person, date or times
            ApiError: If the backend rejects the shift
        """
        self.clear_messages()
        if not self.form.is_complete():
            self.fail("Pick a team member, date and times before saving.")
            raise ValueError("Shift form is incomplete")
        try:
            self.client.create_shift(self.campground_id, self.form)
        except ApiError:
            self.fail("Could not save shift. Try again.")
            raise
        self.show_success("Shift created successfully!")
        self.form.date = ""
        self.form.user_id = ""
        self.load()

    def submit(self, shift_id: str) -> None:
        shift = self.find_shift(shift_id)
        if shift is not None and not shift_helpers.can_submit(shift):
            raise InvalidTransitionError(f"Shift {shift_id} cannot be submitted from status {shift.status}")
        with self._processing(shift_id):
            self.client.submit_shift(shift_id)
            self.show_success("Shift submitted for approval")
            self.load()

    def approve(self, shift_id: str) -> None:
        self._decide(shift_id, approve=True)

    def reject(self, shift_id: str) -> None:
        self._decide(shift_id, approve=False)

    def _decide(self, shift_id: str, approve: bool) -> None:
        verb = "approve" if approve else "reject"
        if not self.current_user_id:
            self.fail(f"You must be logged in to {verb} shifts")
            return
        shift = self.find_shift(shift_id)
        if shift is not None and not shift_helpers.can_decide(shift):
            raise InvalidTransitionError(f"Shift {shift_id} cannot be {verb}d from status {shift.status}")
        with self._processing(shift_id):
            if approve:
                self.client.approve_shift(shift_id, self.current_user_id)
                self.show_success("Shift approved!")
            else:
                self.client.reject_shift(shift_id, self.current_user_id)
                self.show_success("Shift rejected")
            self.load()

    def _patch(self, shift_id: str, payload: dict | None) -> bool:
        if payload is None:
            return False
        with self._processing(shift_id):
            self.client.update_shift(shift_id, payload)
            self.load()
        return True

    def move_by_days(self, shift_id: str, delta_days: int) -> bool:
        shift = self.find_shift(shift_id)
        if shift is None:
            return False
        return self._patch(shift_id, shift_helpers.move_by_days_payload(shift, delta_days))

    def move_time(self, shift_id: str, delta_minutes: int) -> bool:
        shift = self.find_shift(shift_id)
        if shift is None:
            return False
        return self._patch(shift_id, shift_helpers.move_time_payload(shift, delta_minutes))

    def start_drag(self, shift_id: str) -> None:
        self.drag_shift_id = shift_id

    def drop_on_day(self, day) -> bool:
        """Move the dragged shift to ``day``; no request when it is already there."""
        if not self.drag_shift_id:
            return False
        shift = self.find_shift(self.drag_shift_id)
        self.drag_shift_id = None
        if shift is None:
            return False
        return self._patch(shift.shift_id, shift_helpers.drop_on_day_payload(shift, day))

    def drop_on_hour(self, day, hour: int) -> bool:
        """Move the dragged shift to ``hour:00`` on ``day`` keeping its duration."""
        if not self.drag_shift_id:
            return False
        try:
            shift = self.find_shift(self.drag_shift_id)
            if shift is None:
                return False
            return self._patch(shift.shift_id, shift_helpers.drop_on_hour_payload(shift, day, hour))
        finally:
            self.drag_shift_id = None

    def duplicate_to_form(self, shift_id: str) -> None:
        shift = self.find_shift(shift_id)
        if shift is None:
            return
        self.form = shift_helpers.duplicate_to_form(shift)
        self.show_success("Form prefilled from shift")

    def request_swap(self, shift_id: str, recipient_id: str, note: str | None = None) -> None:
        if not shift_id or not recipient_id or not self.current_user_id:
            return
        self.clear_messages()
        try:
            self.client.request_swap(self.campground_id, shift_id, self.current_user_id, recipient_id, note)
        except ApiError:
            self.fail("Could not send swap request. Please try again.")
            raise
        self.show_success("Swap request sent!")
