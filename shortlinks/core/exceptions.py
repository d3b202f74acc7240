"""
Custom Exceptions

This module defines the error taxonomy of the short link service.

- InvalidURLError: malformed input, caller's fault, not retryable
- ShortLinkNotFoundError: unknown short id, terminal
- StoreUnavailableError: transient record store fault, safe to retry with backoff
- UnauthorizedError: requester does not own the short link, terminal
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for the short link service."""
    pass


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class ShortLinkNotFoundError(URLShortenerException):
    """Raised when a short id is not present in the record store."""

    def __init__(self, short_id: str):
        self.short_id = short_id
        super().__init__(f"Short id '{short_id}' not found")


class StoreUnavailableError(URLShortenerException):
    """
    Raised when the record store cannot complete an operation.

    Retryable: nothing was persisted by the failed operation.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Record store unavailable: {message}")


class UnauthorizedError(URLShortenerException):
    """Raised when a principal acts on a short link it does not own."""

    def __init__(self, short_id: str, owner_id: str):
        self.short_id = short_id
        self.owner_id = owner_id
        super().__init__(f"Short id '{short_id}' is not owned by '{owner_id}'")
