"""Pricing preview for seasonal rate cards.

Display-only: the preview is never persisted or used to charge a guest. The
backend owns the authoritative calculation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import List

from campdesk.domain.enums import DiscountCondition, DiscountType, IncentiveType
from campdesk.domain.models import Discount, Incentive, RateCard

# Season length assumed for per-month discounts; not the contracted length.
PREVIEW_SEASON_MONTHS = 6


@dataclass(frozen=True)
class PricingContext:
    """Hypothetical guest the preview is computed for."""

    is_metered: bool = False
    pays_in_full: bool = False
    payment_method: str = "check"


@dataclass(frozen=True)
class AppliedDiscount:
    name: str
    amount: float


@dataclass(frozen=True)
class EarnedIncentive:
    name: str
    value: float
    type: str


@dataclass
class PricingPreview:
    total: float
    applied_discounts: List[AppliedDiscount] = field(default_factory=list)
    earned_incentives: List[EarnedIncentive] = field(default_factory=list)

    @property
    def total_discount(self) -> float:
        return sum(d.amount for d in self.applied_discounts)


def allowed_payment_methods(condition_value) -> List[str]:
    """
    Parse the allow-list of a ``payment_method`` condition.

    The value is JSON such as ``{"methods": ["ach", "check"]}``. Anything
    missing or malformed yields an empty list.
    """
    if not condition_value:
        return []
    try:
        parsed = json.loads(condition_value)
    except (TypeError, ValueError):
        return []
    if not isinstance(parsed, dict):
        return []
    methods = parsed.get("methods") or []
    if not isinstance(methods, list):
        return []
    return [m for m in methods if isinstance(m, str)]


def discount_applies(discount: Discount, context: PricingContext) -> bool:
    """Evaluate a discount's condition; unknown condition types never apply."""
    condition = discount.condition_type
    if condition == DiscountCondition.METERED_UTILITIES.value:
        return bool(context.is_metered)
    if condition == DiscountCondition.PAY_IN_FULL.value:
        return bool(context.pays_in_full)
    if condition == DiscountCondition.PAYMENT_METHOD.value:
        return context.payment_method in allowed_payment_methods(discount.condition_value)
    return False


def discount_amount(discount: Discount, running_total: float) -> float:
    """
    Reduction a discount takes off the running total.

    Percentages are taken of the running total at the time the discount is
    applied, so list order changes the result.
    """
    amount = float(discount.discount_amount or 0)
    if discount.discount_type == DiscountType.FIXED_AMOUNT.value:
        return amount
    if discount.discount_type == DiscountType.PERCENTAGE.value:
        return running_total * amount / 100
    if discount.discount_type == DiscountType.PER_MONTH.value:
        return amount * PREVIEW_SEASON_MONTHS
    return 0.0


def incentive_earned(incentive: Incentive, context: PricingContext) -> bool:
    # Only pay-in-full incentives are previewed.
    if not incentive.is_active:
        return False
    return incentive.condition_type == DiscountCondition.PAY_IN_FULL.value and bool(context.pays_in_full)


def preview_pricing(rate_card: RateCard, context: PricingContext) -> PricingPreview:
    """
    Compute the preview total, applied discounts and earned incentives.

    Active discounts are evaluated in stored list order; ``priority`` and
    ``stackable`` are not consulted. The total is not clamped at zero.

    Args:
        rate_card: Rate card with its discounts and incentives loaded
        context: Guest situation to preview

    Returns:
        PricingPreview with the running total after all applicable discounts
    """
    total = float(rate_card.base_rate or 0)
    applied: List[AppliedDiscount] = []

    for discount in rate_card.discounts:
        if not discount.is_active:
            continue
        if not discount_applies(discount, context):
            continue
        amount = discount_amount(discount, total)
        applied.append(AppliedDiscount(name=discount.name, amount=amount))
        total -= amount

    earned = [
        EarnedIncentive(name=i.name, value=float(i.incentive_value or 0), type=i.incentive_type)
        for i in rate_card.incentives
        if incentive_earned(i, context)
    ]

    return PricingPreview(total=total, applied_discounts=applied, earned_incentives=earned)


def incentive_label(incentive: EarnedIncentive) -> str:
    """Display line for an earned incentive."""
    value = _money(incentive.value)
    if incentive.type == IncentiveType.GUEST_PASSES.value:
        return f"${value} in Guest Passes"
    if incentive.type == IncentiveType.STORE_CREDIT.value:
        return f"${value} Store Credit"
    return incentive.name


def _money(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"
