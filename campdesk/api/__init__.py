"""Backend API access."""

from .client import ApiClient

__all__ = ["ApiClient"]
