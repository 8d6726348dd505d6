"""Page state containers for the campground staff and seasonal screens."""

from .base import BaseView
from .rate_cards import RateCardsView
from .scheduling import SchedulingView
from .swaps import SwapsView

__all__ = [
    "BaseView",
    "RateCardsView",
    "SchedulingView",
    "SwapsView",
]
