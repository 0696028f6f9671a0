"""Reusable services."""

from auralis.services.fetch_health import (
    FetchHealthMonitor,
    get_fetch_health_monitor,
    init_fetch_health_monitor,
)

__all__ = [
    "FetchHealthMonitor",
    "get_fetch_health_monitor",
    "init_fetch_health_monitor",
]
