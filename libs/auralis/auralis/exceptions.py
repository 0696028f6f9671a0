"""Auralis exception hierarchy."""

from __future__ import annotations

from auralis.error_codes import FetchErrorKind


class AuralisError(Exception):
    """Base error for Auralis."""


class ConfigurationError(AuralisError):
    """Raised when configuration is invalid."""


class ValidationError(AuralisError):
    """Raised when a caller-supplied value (upload request, recording key) is rejected."""


class StorageError(AuralisError):
    """Raised when the storage collaborator fails for a reason other than not-found."""

    def __init__(self, kind: FetchErrorKind, message: str, *, location: str | None = None) -> None:
        prefix = kind.value
        if location:
            prefix = f"{prefix} (location={location})"
        super().__init__(f"{prefix}: {message}")
        self.kind = kind
        self.message = message
        self.location = location


class ArtifactNotFoundError(AuralisError):
    """Raised when an expected artifact is missing."""


class PayloadError(AuralisError):
    """Raised when an artifact body does not have the expected shape."""
