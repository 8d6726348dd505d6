"""Load and validate configuration (JSON, or YAML via PyYAML)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError

DEFAULT_BASE_URL = "http://localhost:4000"
DEFAULT_TIMEOUT = 20.0


@dataclass
class ApiSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class CampdeskConfig:
    api: ApiSettings = field(default_factory=ApiSettings)
    campground_id: str | None = None
    db_url: str = "sqlite:///campdesk.db"
    schedule_window_days: int = 21
    default_payment_method: str = "check"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def _positive(value, name: str, cast):
    try:
        number = cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def load_config(path: str | Path | None = None) -> CampdeskConfig:
    """
    Load configuration from a file and the environment.

    The file is optional; ``.json`` files are read as JSON, anything else as
    YAML. Environment variables override file values:
    ``CAMPDESK_API_URL``, ``CAMPDESK_TIMEOUT``, ``CAMPDESK_CAMPGROUND_ID``,
    ``CAMPDESK_DB_URL``.

    Args:
        path: Path to a config file, or None for defaults plus environment

    Returns:
        CampdeskConfig

    Raises:
        ConfigError: If the file is missing or a value is invalid
    """
    data: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        data = _read_file(path)

    api_data = data.get("api") or {}
    base_url = os.getenv("CAMPDESK_API_URL") or api_data.get("base_url") or DEFAULT_BASE_URL
    timeout = os.getenv("CAMPDESK_TIMEOUT") or api_data.get("timeout", DEFAULT_TIMEOUT)

    cfg = CampdeskConfig(
        api=ApiSettings(
            base_url=str(base_url).rstrip("/"),
            timeout=_positive(timeout, "api.timeout", float),
        ),
        campground_id=os.getenv("CAMPDESK_CAMPGROUND_ID") or data.get("campground_id"),
        db_url=os.getenv("CAMPDESK_DB_URL") or data.get("db_url") or "sqlite:///campdesk.db",
        schedule_window_days=_positive(data.get("schedule_window_days", 21), "schedule_window_days", int),
        default_payment_method=str(data.get("default_payment_method") or "check"),
    )
    return cfg
