"""HTTP client for the campground backend (staff and seasonal endpoints)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

import requests

from campdesk.config import DEFAULT_TIMEOUT, CampdeskConfig
from campdesk.data_io import iso_timestamp
from campdesk.domain.forms import DiscountDraft, IncentiveDraft, RateCardDraft, ShiftForm
from campdesk.domain.models import RateCard, Shift, StaffMember, StaffRole, SwapRequest
from campdesk.errors import ApiError


class ApiClient:
    """
    Thin wrapper over ``requests.Session`` for the backend JSON API.

    Every call goes through ``_request``; a non-2xx response or a transport
    failure raises ``ApiError``. Read calls return domain models.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session=None):
        """
        Args:
            base_url: Backend origin, e.g. ``https://app.example.com``
            timeout: Per-request timeout in seconds
            session: Optional session object (anything with ``request()``)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, cfg: CampdeskConfig) -> "ApiClient":
        return cls(cfg.api.base_url, timeout=cfg.api.timeout)

    def _request(self, method: str, path: str, params: dict | None = None, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self.session.request(method, url, params=params or None, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(method, path, None, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise ApiError(method, path, response.status_code, _error_message(response))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(method, path, response.status_code, "response is not JSON") from e

    # --- shifts ---

    def list_shifts(
        self,
        campground_id: str,
        start: date | datetime,
        end: date | datetime,
        status: str | None = None,
    ) -> List[Shift]:
        """Shifts between ``start`` and ``end``; ``status="all"`` means no filter."""
        params = {
            "campgroundId": campground_id,
            "startDate": iso_timestamp(_as_datetime(start)),
            "endDate": iso_timestamp(_as_datetime(end)),
            "status": status if status and status != "all" else None,
        }
        data = self._request("GET", "/api/staff/shifts", params=params) or []
        return [Shift.from_payload(item, campground_id) for item in data]

    def create_shift(self, campground_id: str, form: ShiftForm) -> Any:
        return self._request("POST", "/api/staff/shifts", json=form.to_payload(campground_id))

    def update_shift(self, shift_id: str, payload: dict) -> Any:
        return self._request("PATCH", f"/api/staff/shifts/{shift_id}", json=payload)

    def submit_shift(self, shift_id: str) -> Any:
        return self._request("POST", f"/api/staff/shifts/{shift_id}/submit")

    def approve_shift(self, shift_id: str, approver_id: str) -> Any:
        return self._request("POST", f"/api/staff/shifts/{shift_id}/approve", json={"approverId": approver_id})

    def reject_shift(self, shift_id: str, approver_id: str) -> Any:
        return self._request("POST", f"/api/staff/shifts/{shift_id}/reject", json={"approverId": approver_id})

    # --- roles and members ---

    def list_roles(self, campground_id: str) -> List[StaffRole]:
        data = self._request("GET", "/api/staff/roles", params={"campgroundId": campground_id}) or []
        return [StaffRole.from_payload(item) for item in data]

    def list_members(self, campground_id: str) -> List[StaffMember]:
        data = self._request("GET", f"/api/campgrounds/{campground_id}/members") or []
        return [StaffMember.from_payload(item) for item in data]

    def whoami(self) -> dict:
        """Current user with ``ownershipRoles`` and campground ``memberships``."""
        data = self._request("GET", "/api/permissions/whoami")
        return data if isinstance(data, dict) else {}

    # --- swaps ---

    def list_swaps(self, campground_id: str) -> List[SwapRequest]:
        data = self._request("GET", "/api/staff/swaps", params={"campgroundId": campground_id}) or []
        return [SwapRequest.from_payload(item) for item in data]

    def request_swap(
        self,
        campground_id: str,
        shift_id: str,
        requester_id: str,
        recipient_id: str,
        note: str | None = None,
    ) -> Any:
        payload = {
            "campgroundId": campground_id,
            "requesterShiftId": shift_id,
            "requesterId": requester_id,
            "recipientUserId": recipient_id,
        }
        if note:
            payload["note"] = note
        return self._request("POST", "/api/staff/swaps", json=payload)

    def respond_swap(self, swap_id: str, recipient_id: str, accept: bool) -> Any:
        return self._request(
            "POST", f"/api/staff/swaps/{swap_id}/respond", json={"recipientId": recipient_id, "accept": accept}
        )

    def decide_swap(self, swap_id: str, manager_id: str, approve: bool) -> Any:
        return self._request(
            "POST", f"/api/staff/swaps/{swap_id}/approve", json={"managerId": manager_id, "approve": approve}
        )

    def cancel_swap(self, swap_id: str, requester_id: str) -> Any:
        return self._request("POST", f"/api/staff/swaps/{swap_id}/cancel", json={"requesterId": requester_id})

    # --- seasonal rate cards ---

    def list_rate_cards(self, campground_id: str, season_year: int) -> List[RateCard]:
        data = self._request(
            "GET",
            f"/api/seasonals/campground/{campground_id}/rate-cards",
            params={"seasonYear": season_year},
        ) or []
        return [RateCard.from_payload(item, campground_id) for item in data]

    def create_rate_card(self, campground_id: str, draft: RateCardDraft) -> Any:
        return self._request("POST", "/api/seasonals/rate-cards", json=draft.to_payload(campground_id))

    def add_discount(self, rate_card_id: str, draft: DiscountDraft) -> Any:
        return self._request("POST", f"/api/seasonals/rate-cards/{rate_card_id}/discounts", json=draft.to_payload())

    def add_incentive(self, rate_card_id: str, draft: IncentiveDraft) -> Any:
        return self._request("POST", f"/api/seasonals/rate-cards/{rate_card_id}/incentives", json=draft.to_payload())

    # --- site map ---

    def get_site_map(self, campground_id: str, start: date | None = None, end: date | None = None) -> dict:
        params = {
            "startDate": start.isoformat() if start else None,
            "endDate": end.isoformat() if end else None,
        }
        return self._request("GET", f"/api/campgrounds/{campground_id}/map", params=params) or {}


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:200]
    if isinstance(body, dict):
        message: Optional[Any] = body.get("message") or body.get("error")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return ""
