"""Base view interface shared by the campground pages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Set

from campdesk.api.client import ApiClient


class BaseView(ABC):
    """
    Abstract base class for page state containers.

    A view owns the data fetched for one campground page plus its view-local
    state (filters, form drafts, in-flight ids). Mutations go through the API
    client and are followed by a reload.
    """

    name: str | None = None  # Override in subclasses (e.g., "staff-scheduling")

    def __init__(self, client: ApiClient, campground_id: str):
        self.client = client
        self.campground_id = campground_id
        self.loading = False
        self.error: str | None = None
        self.success_message: str | None = None
        self.processing: Set[str] = set()

    @abstractmethod
    def load(self) -> None:
        """
        Fetch the page data from the backend.

        Raises:
            ApiError: If the backend call fails (``error`` is set first)
        """
        pass

    def get_view_name(self) -> str:
        return self.name or "UNKNOWN"

    def show_success(self, message: str) -> None:
        self.success_message = message
        print(f"[OK] {message}")

    def fail(self, message: str) -> None:
        self.error = message
        print(f"[ERROR] {message}")

    def clear_messages(self) -> None:
        self.error = None
        self.success_message = None
