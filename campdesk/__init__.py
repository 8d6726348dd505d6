"""Campdesk: campground staff scheduling and seasonal rate card tooling.

Modules:
- config: load and validate configuration (YAML or JSON, environment overrides)
- data_io: wire value helpers for days, timestamps and clock strings
- errors: exception hierarchy
- domain: models, form drafts and the local snapshot store
- services: shift conflict detection, pricing preview and page helpers
- api: HTTP client for the backend
- views: state containers for the scheduling, swap and rate card pages
- reporting: pandas summaries of a scheduling window and a pricing preview
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "data_io",
    "errors",
    "domain",
    "services",
    "api",
    "views",
    "reporting",
    "cli",
]
