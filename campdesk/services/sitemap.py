"""Site map helpers: base image lookup and site counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

# Known layouts of the base image inside ``config.layers``, tried in order.
BASE_IMAGE_SHAPES: Tuple[Tuple[str, ...], ...] = (
    ("baseImageUrl",),
    ("baseImage", "url"),
    ("background", "url"),
    ("image",),
)


def _lookup(layers: dict, path: Tuple[str, ...]):
    node = layers
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def resolve_base_image_url(layers) -> Optional[str]:
    """
    Find the base map image URL in a layers config.

    Each shape in ``BASE_IMAGE_SHAPES`` is tried in order; the first one that
    resolves to a string wins.

    Args:
        layers: ``config.layers`` of the campground map (any JSON value)

    Returns:
        The URL, or None when no known shape matches
    """
    if not isinstance(layers, dict):
        return None
    for path in BASE_IMAGE_SHAPES:
        value = _lookup(layers, path)
        if isinstance(value, str):
            return value
    return None


def map_base_image_url(map_data) -> Optional[str]:
    """Base image URL of a map endpoint payload (``config.layers``); None when absent."""
    if not isinstance(map_data, dict):
        return None
    config = map_data.get("config")
    if not isinstance(config, dict):
        return None
    return resolve_base_image_url(config.get("layers"))


@dataclass
class SiteMapStats:
    ada_count: int = 0
    conflict_count: int = 0
    labels: Dict[str, str] = field(default_factory=dict)


def site_label(site: dict) -> str:
    return site.get("label") or site.get("name") or site.get("siteNumber") or site.get("siteId") or ""


def site_map_stats(sites: Iterable[dict]) -> SiteMapStats:
    """Count ADA sites and sites with booking conflicts; build the label lookup."""
    stats = SiteMapStats()
    for site in sites:
        if site.get("ada"):
            stats.ada_count += 1
        if site.get("conflicts"):
            stats.conflict_count += 1
        if site.get("siteId"):
            stats.labels[site["siteId"]] = site_label(site)
    return stats
