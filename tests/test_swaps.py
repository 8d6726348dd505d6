"""Tests for swap request filtering and manager detection."""

import pytest

from campdesk.domain.models import SwapRequest
from campdesk.services.swaps import filter_swaps, is_manager, pending_incoming_count, pending_manager_count


@pytest.fixture
def swaps():
    return [
        SwapRequest(swap_id="s1", status="pending_recipient", requester_id="u1", recipient_id="u2"),
        SwapRequest(swap_id="s2", status="pending_manager", requester_id="u2", recipient_id="u3"),
        SwapRequest(swap_id="s3", status="approved", requester_id="u3", recipient_id="u1"),
        SwapRequest(swap_id="s4", status="pending_recipient", requester_id="u3", recipient_id="u2"),
    ]


def _ids(items):
    return [s.swap_id for s in items]


def test_all_tab_returns_everything(swaps):
    assert _ids(filter_swaps(swaps, "all", "u1")) == ["s1", "s2", "s3", "s4"]


def test_incoming_and_outgoing_tabs(swaps):
    assert _ids(filter_swaps(swaps, "incoming", "u2")) == ["s1", "s4"]
    assert _ids(filter_swaps(swaps, "outgoing", "u2")) == ["s2"]


def test_manager_tab_shows_pending_manager(swaps):
    assert _ids(filter_swaps(swaps, "manager", "u1")) == ["s2"]


def test_without_user_every_tab_shows_everything(swaps):
    assert _ids(filter_swaps(swaps, "incoming", None)) == ["s1", "s2", "s3", "s4"]


def test_unknown_tab_rejected(swaps):
    with pytest.raises(ValueError):
        filter_swaps(swaps, "archived", "u1")


def test_counters(swaps):
    assert pending_incoming_count(swaps, "u2") == 2
    assert pending_incoming_count(swaps, "u1") == 0
    assert pending_manager_count(swaps) == 1


def test_swap_from_payload_reads_nested_people():
    swap = SwapRequest.from_payload({
        "id": "s1",
        "status": "pending_recipient",
        "requester": {"id": "u1", "firstName": "Ada", "lastName": "Lovelace"},
        "recipient": {"id": "u2", "email": "grace@camp.test"},
        "requesterShift": {"id": "sh1", "shiftDate": "2024-03-02T00:00:00.000Z"},
        "requesterNote": "Family event",
    })
    assert swap.requester_name == "Ada Lovelace"
    assert swap.recipient_name == "grace@camp.test"
    assert swap.requester_shift_id == "sh1"
    assert str(swap.requester_shift_date) == "2024-03-02"
    assert swap.manager_id is None


@pytest.mark.parametrize("whoami,expected", [
    ({"user": {"ownershipRoles": ["owner"]}}, True),
    ({"user": {"memberships": [{"campgroundId": "cg1", "role": "admin"}]}}, True),
    ({"user": {"memberships": [{"campgroundId": "cg1", "role": "staff"}]}}, False),
    ({"user": {"memberships": [{"campgroundId": "other", "role": "owner"}]}}, False),
    (None, False),
])
def test_is_manager(whoami, expected):
    assert is_manager(whoami, "cg1") is expected
