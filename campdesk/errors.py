"""Exceptions raised by campdesk."""

from __future__ import annotations


class CampdeskError(Exception):
    """Base exception for campdesk failures."""


class ConfigError(CampdeskError):
    """Raised when configuration is missing or invalid."""


class ApiError(CampdeskError):
    """Raised when a backend request fails or returns a non-2xx status."""

    def __init__(self, method: str, path: str, status_code: int | None, message: str = ""):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.message = message
        status = status_code if status_code is not None else "no response"
        detail = f": {message}" if message else ""
        super().__init__(f"{method} {path} failed ({status}){detail}")


class InvalidTransitionError(CampdeskError, ValueError):
    """Raised when a shift status change is not allowed from its current status."""
