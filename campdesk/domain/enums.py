"""Enumerations shared by the staff and seasonal domain models."""

from __future__ import annotations

from enum import Enum


class ShiftStatus(str, Enum):
    """Approval lifecycle of a staff shift."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


# Allowed status moves; approved/rejected are terminal.
SHIFT_TRANSITIONS = {
    ShiftStatus.SCHEDULED: {ShiftStatus.SUBMITTED},
    ShiftStatus.IN_PROGRESS: {ShiftStatus.SUBMITTED},
    ShiftStatus.SUBMITTED: {ShiftStatus.APPROVED, ShiftStatus.REJECTED},
    ShiftStatus.APPROVED: set(),
    ShiftStatus.REJECTED: set(),
}


class SwapStatus(str, Enum):
    PENDING_RECIPIENT = "pending_recipient"
    PENDING_MANAGER = "pending_manager"
    APPROVED = "approved"
    REJECTED = "rejected"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class DiscountCondition(str, Enum):
    """Condition vocabulary shared by discounts and incentives."""

    METERED_UTILITIES = "metered_utilities"
    PAY_IN_FULL = "pay_in_full"
    PAYMENT_METHOD = "payment_method"
    EARLY_BIRD = "early_bird"
    RETURNING_GUEST = "returning_guest"
    TENURE_YEARS = "tenure_years"
    REFERRAL = "referral"
    MILITARY = "military"
    SENIOR = "senior"
    CUSTOM = "custom"


class DiscountType(str, Enum):
    FIXED_AMOUNT = "fixed_amount"
    PERCENTAGE = "percentage"
    PER_MONTH = "per_month"


class IncentiveType(str, Enum):
    GUEST_PASSES = "guest_passes"
    STORE_CREDIT = "store_credit"
    FREE_NIGHTS = "free_nights"
    EARLY_SITE_SELECTION = "early_site_selection"
    RATE_LOCK = "rate_lock"
    AMENITY_ACCESS = "amenity_access"
    CUSTOM = "custom"


class BillingFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    SEASONAL = "seasonal"


class SwapTab(str, Enum):
    """Tabs of the swap request list."""

    ALL = "all"
    INCOMING = "incoming"
    OUTGOING = "outgoing"
    MANAGER = "manager"
