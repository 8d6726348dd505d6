"""Seasonal rate cards page: per-season cards with a live pricing preview."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from campdesk.api.client import ApiClient
from campdesk.domain.forms import DiscountDraft, IncentiveDraft, RateCardDraft
from campdesk.domain.models import RateCard
from campdesk.errors import ApiError
from campdesk.services.pricing import PricingContext, PricingPreview, preview_pricing

from .base import BaseView


class RateCardsView(BaseView):
    """
    State of the rate cards page.

    The preview context (metered, pays in full, payment method) is shared by
    every card on the page, as the preview toggles are.
    """

    name = "seasonal-rate-cards"

    def __init__(self, client: ApiClient, campground_id: str, today: date | None = None):
        super().__init__(client, campground_id)
        today = today or date.today()
        self.current_year = today.year
        self.selected_year = today.year
        self.rate_cards: List[RateCard] = []
        self.preview_context = PricingContext()
        self.new_rate_card = RateCardDraft.for_season(today.year + 1)
        self.new_discount = DiscountDraft()
        self.new_incentive = IncentiveDraft()

    @property
    def year_options(self) -> List[int]:
        return [self.current_year + offset for offset in (-1, 0, 1, 2)]

    def select_year(self, year: int) -> None:
        self.selected_year = int(year)
        self.load()

    def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.rate_cards = self.client.list_rate_cards(self.campground_id, self.selected_year)
            print(f"[INFO] Loaded {len(self.rate_cards)} rate cards for {self.selected_year}")
        except ApiError:
            self.fail("Failed to fetch rate cards")
            raise
        finally:
            self.loading = False

    def find_rate_card(self, rate_card_id: str) -> Optional[RateCard]:
        for card in self.rate_cards:
            if card.rate_card_id == rate_card_id:
                return card
        return None

    def set_preview(self, is_metered: bool | None = None, pays_in_full: bool | None = None,
                    payment_method: str | None = None) -> None:
        ctx = self.preview_context
        self.preview_context = PricingContext(
            is_metered=ctx.is_metered if is_metered is None else is_metered,
            pays_in_full=ctx.pays_in_full if pays_in_full is None else pays_in_full,
            payment_method=ctx.payment_method if payment_method is None else payment_method,
        )

    def preview(self, rate_card_id: str) -> PricingPreview:
        card = self.find_rate_card(rate_card_id)
        if card is None:
            raise KeyError(f"Rate card {rate_card_id} is not loaded")
        return preview_pricing(card, self.preview_context)

    def start_draft_for_selected_year(self) -> None:
        """Empty-state shortcut: draft a card for the season being viewed."""
        self.new_rate_card = RateCardDraft.for_season(self.selected_year)

    def create_rate_card(self) -> None:
        self.clear_messages()
        try:
            self.client.create_rate_card(self.campground_id, self.new_rate_card)
        except ApiError:
            self.fail("Failed to create rate card")
            raise
        self.show_success(f"Rate card '{self.new_rate_card.name}' created")
        self.new_rate_card = RateCardDraft.for_season(self.current_year + 1)
        self.load()

    def add_discount(self, rate_card_id: str) -> None:
        self.clear_messages()
        try:
            self.client.add_discount(rate_card_id, self.new_discount)
        except ApiError:
            self.fail("Failed to add discount")
            raise
        self.show_success(f"Discount '{self.new_discount.name}' added")
        self.new_discount = DiscountDraft()
        self.load()

    def add_incentive(self, rate_card_id: str) -> None:
        self.clear_messages()
        try:
            self.client.add_incentive(rate_card_id, self.new_incentive)
        except ApiError:
            self.fail("Failed to add incentive")
            raise
        self.show_success(f"Incentive '{self.new_incentive.name}' added")
        self.new_incentive = IncentiveDraft()
        self.load()
