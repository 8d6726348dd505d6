"""Form drafts sent to the backend by create/add mutations."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import List

from .enums import BillingFrequency, DiscountCondition, DiscountType, IncentiveType


@dataclass
class ShiftForm:
    """New-shift form on the scheduling page."""

    user_id: str = ""
    date: str = ""
    start: str = "09:00"
    end: str = "17:00"
    role: str = ""

    def is_complete(self) -> bool:
        return bool(self.user_id and self.date and self.start and self.end)

    def to_payload(self, campground_id: str) -> dict:
        return {
            "campgroundId": campground_id,
            "userId": self.user_id,
            "shiftDate": self.date,
            "startTime": self.start,
            "endTime": self.end,
            "role": self.role,
        }


@dataclass
class RateCardDraft:
    name: str
    season_year: int
    base_rate: float = 2400
    billing_frequency: str = BillingFrequency.MONTHLY.value
    description: str = ""
    included_utilities: List[str] = field(default_factory=list)
    season_start_date: str = ""
    season_end_date: str = ""
    is_default: bool = True

    @classmethod
    def for_season(cls, season_year: int) -> "RateCardDraft":
        """Default draft for a season, 15 April to 15 October."""
        return cls(
            name=f"{season_year} Season",
            season_year=season_year,
            season_start_date=f"{season_year}-04-15",
            season_end_date=f"{season_year}-10-15",
        )

    @classmethod
    def for_next_season(cls, today: date | None = None) -> "RateCardDraft":
        today = today or date.today()
        return cls.for_season(today.year + 1)

    def to_payload(self, campground_id: str) -> dict:
        return {
            "campgroundId": campground_id,
            "name": self.name,
            "seasonYear": self.season_year,
            "baseRate": self.base_rate,
            "billingFrequency": self.billing_frequency,
            "description": self.description,
            "includedUtilities": list(self.included_utilities),
            "seasonStartDate": self.season_start_date,
            "seasonEndDate": self.season_end_date,
            "isDefault": self.is_default,
        }


@dataclass
class DiscountDraft:
    name: str = ""
    description: str = ""
    condition_type: str = DiscountCondition.METERED_UTILITIES.value
    condition_value: str = ""
    discount_type: str = DiscountType.FIXED_AMOUNT.value
    discount_amount: float = 0
    stackable: bool = True
    priority: int = 0

    def to_payload(self) -> dict:
        return _camel(asdict(self))


@dataclass
class IncentiveDraft:
    name: str = ""
    description: str = ""
    condition_type: str = DiscountCondition.PAY_IN_FULL.value
    condition_value: str = ""
    incentive_type: str = IncentiveType.GUEST_PASSES.value
    incentive_value: float = 0

    def to_payload(self) -> dict:
        return _camel(asdict(self))


def _camel(data: dict) -> dict:
    out = {}
    for key, value in data.items():
        head, *rest = key.split("_")
        out[head + "".join(part.title() for part in rest)] = value
    return out
