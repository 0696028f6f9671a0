"""Canonical fetch error kinds surfaced to logs, health and API."""

from __future__ import annotations

from enum import Enum


class FetchErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
