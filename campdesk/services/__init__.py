"""Pure computations over fetched scheduling and rate card data."""

from .conflicts import find_shift_conflicts, group_shifts_by_day
from .pricing import PricingContext, PricingPreview, incentive_label, preview_pricing
from .shifts import duration_minutes, format_duration, pending_approval_count, schedule_window
from .sitemap import map_base_image_url, resolve_base_image_url, site_map_stats
from .swaps import filter_swaps, pending_incoming_count, pending_manager_count

__all__ = [
    "find_shift_conflicts",
    "group_shifts_by_day",
    "PricingContext",
    "PricingPreview",
    "incentive_label",
    "preview_pricing",
    "duration_minutes",
    "format_duration",
    "pending_approval_count",
    "schedule_window",
    "map_base_image_url",
    "resolve_base_image_url",
    "site_map_stats",
    "filter_swaps",
    "pending_incoming_count",
    "pending_manager_count",
]
