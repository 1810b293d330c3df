"""Error types raised by the storefront core."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for failures surfaced to the screens."""


class ApiError(StorefrontError):
    """A remote call failed for a reason other than cancellation."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidIdentifierError(StorefrontError, ValueError):
    """The item identifier handed to a detail session is missing or malformed."""


class ItemNotLoadedError(StorefrontError):
    """An operation needs the item but it has not been fetched yet."""
