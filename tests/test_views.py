"""Tests for page state containers (scheduling, swaps, rate cards)."""

import datetime as dt

import pytest

from campdesk.domain.models import Discount, RateCard, StaffMember, StaffRole, SwapRequest
from campdesk.errors import ApiError, InvalidTransitionError
from campdesk.views import RateCardsView, SchedulingView, SwapsView


class FakeClient:
    """In-memory stand-in for ApiClient that records every call."""

    def __init__(self, shifts=None, roles=None, members=None, swaps=None, rate_cards=None, me=None):
        self.shifts = shifts or []
        self.roles = roles or []
        self.members = members or []
        self.swaps = swaps or []
        self.rate_cards = rate_cards or []
        self.calls = []
        self.me = me or {}
        self.fail_on = set()

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise ApiError("POST", f"/{name}", 500, "boom")

    def list_shifts(self, campground_id, start, end, status=None):
        self._record("list_shifts", campground_id, start, end, status)
        return list(self.shifts)

    def list_roles(self, campground_id):
        self._record("list_roles", campground_id)
        return list(self.roles)

    def list_members(self, campground_id):
        self._record("list_members", campground_id)
        return list(self.members)

    def create_shift(self, campground_id, form):
        self._record("create_shift", campground_id, form.to_payload(campground_id))

    def update_shift(self, shift_id, payload):
        self._record("update_shift", shift_id, payload)

    def submit_shift(self, shift_id):
        self._record("submit_shift", shift_id)

    def approve_shift(self, shift_id, approver_id):
        self._record("approve_shift", shift_id, approver_id)

    def reject_shift(self, shift_id, approver_id):
        self._record("reject_shift", shift_id, approver_id)

    def request_swap(self, campground_id, shift_id, requester_id, recipient_id, note=None):
        self._record("request_swap", shift_id, requester_id, recipient_id, note)

    def whoami(self):
        self._record("whoami")
        return dict(self.me)

    def list_swaps(self, campground_id):
        self._record("list_swaps", campground_id)
        return list(self.swaps)

    def respond_swap(self, swap_id, recipient_id, accept):
        self._record("respond_swap", swap_id, recipient_id, accept)

    def decide_swap(self, swap_id, manager_id, approve):
        self._record("decide_swap", swap_id, manager_id, approve)

    def cancel_swap(self, swap_id, requester_id):
        self._record("cancel_swap", swap_id, requester_id)

    def list_rate_cards(self, campground_id, season_year):
        self._record("list_rate_cards", campground_id, season_year)
        return list(self.rate_cards)

    def create_rate_card(self, campground_id, draft):
        self._record("create_rate_card", campground_id, draft.to_payload(campground_id))

    def add_discount(self, rate_card_id, draft):
        self._record("add_discount", rate_card_id, draft.to_payload())

    def add_incentive(self, rate_card_id, draft):
        self._record("add_incentive", rate_card_id, draft.to_payload())

    def names(self):
        return [c[0] for c in self.calls]


START = dt.date(2024, 1, 1)


@pytest.fixture
def shifts(make_shift):
    return [
        make_shift("A", start="09:00", end="13:00", status="scheduled"),
        make_shift("B", start="12:00", end="17:00", status="submitted"),
        make_shift("C", user_id="u2", day=dt.date(2024, 1, 2), status="approved"),
    ]


@pytest.fixture
def scheduling(shifts):
    client = FakeClient(
        shifts=shifts,
        roles=[StaffRole(role_id="r1", name="Front Desk"), StaffRole(role_id="r2", name="Grounds")],
        members=[
            StaffMember(member_id="u1", first_name="Ada", last_name="Lovelace"),
            StaffMember(member_id="u2", first_name="Grace", last_name="Hopper"),
        ],
    )
    view = SchedulingView(client, "cg1", current_user_id="m1", window_start=START)
    view.load()
    return view


# --- scheduling ---


def test_scheduling_load_window_and_derived_state(scheduling):
    client = scheduling.client
    assert client.calls[0] == ("list_shifts", "cg1", START, dt.date(2024, 1, 22), "all")
    assert scheduling.total_shifts == 3
    assert scheduling.conflicts == {"A", "B"}
    assert scheduling.pending_approval_count == 1
    assert sorted(scheduling.grouped_by_day) == [START, dt.date(2024, 1, 2)]
    assert scheduling.loading is False
    assert scheduling.get_view_name() == "staff-scheduling"


def test_scheduling_rejects_non_positive_window():
    with pytest.raises(ValueError):
        SchedulingView(FakeClient(), "cg1", window_days=0)


def test_conflicts_follow_shift_changes(scheduling, make_shift):
    scheduling.shifts = [make_shift("A", start="09:00", end="12:00"), make_shift("B", start="12:00", end="17:00")]
    assert scheduling.conflicts == set()


def test_load_failure_sets_error_and_raises(shifts):
    client = FakeClient(shifts=shifts)
    client.fail_on.add("list_shifts")
    view = SchedulingView(client, "cg1", window_start=START)
    with pytest.raises(ApiError):
        view.load()
    assert view.error == "Unable to load shifts. Please retry."
    assert view.loading is False


def test_load_roles_defaults_form_role_and_tolerates_failure(scheduling):
    scheduling.load_roles()
    assert scheduling.form.role == "Front Desk"
    assert [m.member_id for m in scheduling.filtered_staff] == ["u1", "u2"]

    scheduling.client.fail_on.add("list_members")
    scheduling.load_roles()
    assert scheduling.members == []
    assert scheduling.error is None


def test_window_navigation_moves_by_a_week(scheduling):
    scheduling.next_window()
    assert scheduling.window_start == dt.date(2024, 1, 8)
    scheduling.previous_window()
    scheduling.previous_window()
    assert scheduling.window_start == dt.date(2023, 12, 25)
    scheduling.jump_to_today(dt.date(2024, 5, 5))
    assert scheduling.window_start == dt.date(2024, 5, 5)
    assert scheduling.client.names().count("list_shifts") == 5


def test_status_filter(scheduling):
    scheduling.set_status_filter("submitted")
    assert scheduling.client.calls[-1][-1] == "submitted"
    with pytest.raises(ValueError):
        scheduling.set_status_filter("done")


def test_create_shift_resets_person_and_date(scheduling):
    scheduling.form.user_id = "u1"
    scheduling.form.date = "2024-01-03"
    scheduling.form.role = "Grounds"
    scheduling.create_shift()

    name, campground_id, payload = scheduling.client.calls[-2]
    assert name == "create_shift"
    assert payload["shiftDate"] == "2024-01-03"
    assert payload["startTime"] == "09:00"
    assert scheduling.success_message == "Shift created successfully!"
    assert scheduling.form.user_id == ""
    assert scheduling.form.date == ""
    assert scheduling.form.role == "Grounds"
    assert scheduling.client.names()[-1] == "list_shifts"


def test_create_shift_incomplete_form(scheduling):
    with pytest.raises(ValueError):
        scheduling.create_shift()
    assert "create_shift" not in scheduling.client.names()
    assert scheduling.error


def test_create_shift_backend_failure(scheduling):
    scheduling.client.fail_on.add("create_shift")
    scheduling.form.user_id = "u1"
    scheduling.form.date = "2024-01-03"
    with pytest.raises(ApiError):
        scheduling.create_shift()
    assert scheduling.error == "Could not save shift. Try again."
    assert scheduling.form.user_id == "u1"


def test_submit_and_decide(scheduling):
    scheduling.submit("A")
    scheduling.approve("B")
    assert ("submit_shift", "A") in scheduling.client.calls
    assert ("approve_shift", "B", "m1") in scheduling.client.calls
    assert scheduling.processing == set()


def test_invalid_transitions_are_refused(scheduling):
    with pytest.raises(InvalidTransitionError):
        scheduling.submit("C")
    with pytest.raises(InvalidTransitionError):
        scheduling.reject("A")
    assert "submit_shift" not in scheduling.client.names()


def test_approve_requires_user(shifts):
    view = SchedulingView(FakeClient(shifts=shifts), "cg1", window_start=START)
    view.load()
    view.approve("B")
    assert view.error == "You must be logged in to approve shifts"
    assert "approve_shift" not in view.client.names()


def test_move_and_drag(scheduling):
    assert scheduling.move_by_days("A", 1) is True
    assert ("update_shift", "A", {"shiftDate": "2024-01-02"}) in scheduling.client.calls

    assert scheduling.move_time("A", 30) is True
    assert ("update_shift", "A", {"shiftDate": "2024-01-01", "startTime": "09:30", "endTime": "13:30"}) \
        in scheduling.client.calls

    scheduling.start_drag("A")
    assert scheduling.drop_on_day(START) is False
    assert scheduling.drag_shift_id is None

    scheduling.start_drag("C")
    assert scheduling.drop_on_hour("2024-01-04", 6) is True
    assert ("update_shift", "C", {"shiftDate": "2024-01-04", "startTime": "06:00", "endTime": "14:00"}) \
        in scheduling.client.calls
    assert scheduling.drag_shift_id is None


def test_move_unknown_shift_is_noop(scheduling):
    assert scheduling.move_by_days("missing", 1) is False
    assert "update_shift" not in scheduling.client.names()


def test_drop_on_hour_clears_drag_when_shift_is_gone(scheduling):
    scheduling.start_drag("missing")
    assert scheduling.drop_on_hour("2024-01-04", 6) is False
    assert scheduling.drag_shift_id is None


def test_drop_on_hour_clears_drag_on_bad_hour(scheduling):
    scheduling.start_drag("A")
    with pytest.raises(ValueError):
        scheduling.drop_on_hour("2024-01-04", 24)
    assert scheduling.drag_shift_id is None
    assert "update_shift" not in scheduling.client.names()


def test_failed_mutation_clears_previous_success(scheduling):
    scheduling.submit("A")
    assert scheduling.success_message == "Shift submitted for approval"
    scheduling.client.fail_on.add("create_shift")
    scheduling.form.user_id = "u1"
    scheduling.form.date = "2024-01-03"
    with pytest.raises(ApiError):
        scheduling.create_shift()
    assert scheduling.success_message is None
    assert scheduling.error == "Could not save shift. Try again."


def test_duplicate_and_swap(scheduling):
    scheduling.load_roles()
    scheduling.duplicate_to_form("C")
    assert scheduling.form.user_id == "u2"
    assert scheduling.selected_staff.member_id == "u2"
    assert [m.member_id for m in scheduling.swap_recipients("C")] == ["u1"]

    scheduling.request_swap("C", "u1", "Away")
    assert ("request_swap", "C", "m1", "u1", "Away") in scheduling.client.calls
    assert scheduling.success_message == "Swap request sent!"


# --- swaps ---

MANAGER = {"user": {"id": "u2", "ownershipRoles": ["owner"], "memberships": []}}
STAFF = {"user": {"id": "u2", "ownershipRoles": [], "memberships": [{"campgroundId": "cg1", "role": "front_desk"}]}}


def _swaps_client():
    return FakeClient(swaps=[
        SwapRequest(swap_id="s1", status="pending_recipient", requester_id="u1", recipient_id="u2"),
        SwapRequest(swap_id="s2", status="pending_manager", requester_id="u3", recipient_id="u1"),
    ])


@pytest.fixture
def swaps_view():
    view = SwapsView(_swaps_client(), "cg1", current_user_id="u2")
    view.load()
    return view


@pytest.fixture
def manager_swaps_view():
    view = SwapsView(_swaps_client(), "cg1", current_user_id="u2", whoami=MANAGER)
    view.load()
    return view


def test_swaps_tabs_and_counters(swaps_view):
    assert [s.swap_id for s in swaps_view.visible_swaps] == ["s1", "s2"]
    swaps_view.set_tab("incoming")
    assert [s.swap_id for s in swaps_view.visible_swaps] == ["s1"]
    assert swaps_view.pending_incoming == 1
    assert swaps_view.pending_manager == 1
    with pytest.raises(ValueError):
        swaps_view.set_tab("history")


def test_swap_actions_reload(manager_swaps_view):
    view = manager_swaps_view
    view.respond("s1", accept=True)
    assert view.success_message == "Swap accepted! Awaiting manager approval."
    view.decide("s2", approve=False)
    assert view.success_message == "Shift swap rejected."
    view.cancel("s1")
    assert view.client.names() == [
        "list_swaps", "respond_swap", "list_swaps", "decide_swap", "list_swaps", "cancel_swap", "list_swaps",
    ]
    assert ("decide_swap", "s2", "u2", False) in view.client.calls


def test_swap_action_failure(swaps_view):
    swaps_view.client.fail_on.add("respond_swap")
    with pytest.raises(ApiError):
        swaps_view.respond("s1", accept=False)
    assert swaps_view.error == "Could not process response. Please try again."
    assert swaps_view.processing == set()


def test_swap_actions_need_user():
    view = SwapsView(FakeClient(), "cg1")
    view.cancel("s1")
    assert view.client.calls == []


def test_non_manager_cannot_decide(swaps_view):
    assert swaps_view.is_manager is False
    swaps_view.decide("s2", approve=True)
    assert swaps_view.error == "Only managers can approve or reject swaps"
    assert "decide_swap" not in swaps_view.client.names()


def test_manager_decides_only_pending_manager_swaps(manager_swaps_view):
    manager_swaps_view.decide("s1", approve=True)
    assert manager_swaps_view.error == "This swap is not awaiting manager approval"
    manager_swaps_view.decide("missing", approve=True)
    assert manager_swaps_view.error == "This swap is not awaiting manager approval"
    assert "decide_swap" not in manager_swaps_view.client.names()
    assert manager_swaps_view.can_approve(manager_swaps_view.find_swap("s2")) is True


def test_manager_tab_is_refused_for_non_managers(swaps_view):
    assert "manager" not in swaps_view.tabs
    swaps_view.set_tab("manager")
    assert swaps_view.active_tab == "all"
    assert swaps_view.error == "Only managers can view the manager queue"


def test_manager_tab_lists_swaps_awaiting_approval(manager_swaps_view):
    assert manager_swaps_view.tabs == ["all", "incoming", "outgoing", "manager"]
    manager_swaps_view.set_tab("manager")
    assert manager_swaps_view.active_tab == "manager"
    assert [s.swap_id for s in manager_swaps_view.visible_swaps] == ["s2"]
    assert manager_swaps_view.error is None


@pytest.mark.parametrize(
    "me, expected_manager",
    [(MANAGER, True), (STAFF, False)],
)
def test_load_whoami_resolves_user_and_manager(me, expected_manager):
    view = SwapsView(FakeClient(me=me), "cg1")
    view.load_whoami()
    assert view.current_user_id == "u2"
    assert view.is_manager is expected_manager


def test_load_whoami_failure_leaves_non_manager():
    client = FakeClient(me=MANAGER)
    client.fail_on.add("whoami")
    view = SwapsView(client, "cg1", current_user_id="u9")
    view.load_whoami()
    assert view.current_user_id == "u9"
    assert view.is_manager is False


def test_failed_action_clears_previous_success(manager_swaps_view):
    manager_swaps_view.decide("s2", approve=True)
    assert manager_swaps_view.success_message == "Shift swap approved!"
    manager_swaps_view.client.fail_on.add("cancel_swap")
    with pytest.raises(ApiError):
        manager_swaps_view.cancel("s1")
    assert manager_swaps_view.success_message is None
    assert manager_swaps_view.error == "Could not cancel. Please try again."


# --- rate cards ---


@pytest.fixture
def rate_cards_view():
    card = RateCard(rate_card_id="rc1", name="2024 Season", base_rate=2400, discounts=[
        Discount(name="Metered", condition_type="metered_utilities", discount_type="fixed_amount",
                 discount_amount=100, is_active=True),
        Discount(name="PIF", condition_type="pay_in_full", discount_type="percentage",
                 discount_amount=10, is_active=True),
    ], incentives=[])
    view = RateCardsView(FakeClient(rate_cards=[card]), "cg1", today=dt.date(2024, 3, 1))
    view.load()
    return view


def test_rate_cards_year_options_and_draft(rate_cards_view):
    assert rate_cards_view.year_options == [2023, 2024, 2025, 2026]
    assert rate_cards_view.new_rate_card.season_year == 2025
    rate_cards_view.select_year(2026)
    assert rate_cards_view.client.calls[-1] == ("list_rate_cards", "cg1", 2026)
    rate_cards_view.start_draft_for_selected_year()
    assert rate_cards_view.new_rate_card.name == "2026 Season"


def test_rate_cards_preview_uses_shared_context(rate_cards_view):
    assert rate_cards_view.preview("rc1").total == 2400
    rate_cards_view.set_preview(is_metered=True)
    assert rate_cards_view.preview("rc1").total == 2300
    rate_cards_view.set_preview(pays_in_full=True)
    assert rate_cards_view.preview("rc1").total == pytest.approx(2070)
    assert rate_cards_view.preview_context.payment_method == "check"


def test_rate_cards_preview_unknown_card(rate_cards_view):
    with pytest.raises(KeyError):
        rate_cards_view.preview("nope")


def test_rate_cards_mutations(rate_cards_view):
    rate_cards_view.new_discount.name = "Early"
    rate_cards_view.add_discount("rc1")
    assert rate_cards_view.client.calls[-2][:2] == ("add_discount", "rc1")
    assert rate_cards_view.new_discount.name == ""

    rate_cards_view.create_rate_card()
    name, campground_id, payload = rate_cards_view.client.calls[-2]
    assert name == "create_rate_card"
    assert payload["seasonYear"] == 2025


def test_rate_cards_load_failure():
    client = FakeClient()
    client.fail_on.add("list_rate_cards")
    view = RateCardsView(client, "cg1", today=dt.date(2024, 3, 1))
    with pytest.raises(ApiError):
        view.load()
    assert view.error == "Failed to fetch rate cards"
