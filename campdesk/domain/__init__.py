"""Domain models and snapshot data access layer."""

from .models import Base, Discount, Incentive, RateCard, Shift, StaffMember, StaffRole, SwapRequest
from .repositories import RateCardRepository, ShiftRepository

__all__ = [
    "Base",
    "Discount",
    "Incentive",
    "RateCard",
    "Shift",
    "StaffMember",
    "StaffRole",
    "SwapRequest",
    "RateCardRepository",
    "ShiftRepository",
]
