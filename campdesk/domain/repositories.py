"""Repository classes for the local snapshot of backend data."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from .models import Discount, Incentive, RateCard, Shift


class ShiftRepository:
    """Snapshot access for shifts, keyed by campground and calendar window."""

    @staticmethod
    def get_window(
        session: Session,
        campground_id: str,
        start: date,
        end: date,
        status: str | None = None,
    ) -> List[Shift]:
        """
        Get shifts whose day falls in ``[start, end)``.

        Args:
            session: Snapshot session
            campground_id: Campground the shifts belong to
            start: First day of the window (inclusive)
            end: Last day of the window (exclusive)
            status: Optional status filter; None or "all" returns every status
        """
        query = session.query(Shift).filter(
            Shift.campground_id == campground_id,
            Shift.shift_date >= start,
            Shift.shift_date < end,
        )
        if status and status != "all":
            query = query.filter(Shift.status == status)
        return query.order_by(Shift.shift_date, Shift.start_time).all()

    @staticmethod
    def get_by_id(session: Session, shift_id: str) -> Optional[Shift]:
        return session.query(Shift).filter(Shift.shift_id == shift_id).first()

    @staticmethod
    def replace_window(
        session: Session,
        campground_id: str,
        start: date,
        end: date,
        shifts: List[Shift],
    ) -> int:
        """
        Replace the snapshot of a window with freshly fetched shifts.

        Returns:
            Number of shifts stored
        """
        stale = ShiftRepository.get_window(session, campground_id, start, end)
        for shift in stale:
            session.delete(shift)
        session.flush()
        if stale:
            print(f"[INFO] Dropped {len(stale)} stale shifts from snapshot")

        for shift in shifts:
            shift.campground_id = campground_id
            session.merge(shift)
        session.commit()
        return len(shifts)


class RateCardRepository:
    """Snapshot access for rate cards with their discounts and incentives."""

    @staticmethod
    def get_by_season(session: Session, campground_id: str, season_year: int) -> List[RateCard]:
        return (
            session.query(RateCard)
            .filter(RateCard.campground_id == campground_id, RateCard.season_year == season_year)
            .order_by(RateCard.name)
            .all()
        )

    @staticmethod
    def get_by_id(session: Session, rate_card_id: str) -> Optional[RateCard]:
        return session.query(RateCard).filter(RateCard.rate_card_id == rate_card_id).first()

    @staticmethod
    def replace_season(
        session: Session,
        campground_id: str,
        season_year: int,
        rate_cards: List[RateCard],
    ) -> int:
        """Replace the snapshot of one season's rate cards. Returns number stored."""
        stale = RateCardRepository.get_by_season(session, campground_id, season_year)
        for card in stale:
            session.delete(card)
        session.flush()

        for card in rate_cards:
            card.campground_id = campground_id
            for position, discount in enumerate(card.discounts):
                discount.position = position
            for position, incentive in enumerate(card.incentives):
                incentive.position = position
            session.merge(card)
        session.commit()
        return len(rate_cards)

    @staticmethod
    def count_rules(session: Session) -> tuple[int, int]:
        """Number of stored (discounts, incentives)."""
        return session.query(Discount).count(), session.query(Incentive).count()
