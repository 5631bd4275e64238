"""Exception hierarchy for Campusgate."""

from __future__ import annotations


class CampusgateError(Exception):
    """Base exception for all Campusgate errors."""


class ConfigError(CampusgateError):
    """Raised when configuration is invalid."""


class StorageError(CampusgateError):
    """Raised when a store query or write fails."""


class ConflictError(StorageError):
    """Raised when an insert violates a uniqueness constraint."""


class MembershipWriteError(StorageError):
    """Raised when an organization membership could not be written."""


class TransientAuthError(CampusgateError):
    """Raised when the auth provider cannot produce a session right now."""


class FatalTenantError(CampusgateError):
    """Raised when a host must map to an organization but does not.

    Surfaces as a redirect to the central not-found page, never as a 500.
    """

    def __init__(self, key: str, redirect_url: str) -> None:
        super().__init__(f"No organization for {key!r}")
        self.key = key
        self.redirect_url = redirect_url
