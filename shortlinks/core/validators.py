"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.

Validation is intentionally limited to the URL scheme: long URLs must start
with http:// or https:// and carry at least one more character.
"""

import re
from typing import Optional

from shortlinks.core.setting import settings

LONG_URL_PATTERN = re.compile(r"^https?://.+")


def normalize_long_url(url: Optional[str]) -> Optional[str]:
    """
    Trim and validate a long URL.

    Args:
        url: The URL submitted for shortening

    Returns:
        The trimmed URL if it uses http/https, None otherwise
    """
    if not url or not isinstance(url, str):
        return None

    url = url.strip()

    if not LONG_URL_PATTERN.match(url):
        return None

    return url


def sanitize_short_id(
    short_id: str,
    length: Optional[int] = None,
    alphabet: Optional[str] = None
) -> Optional[str]:
    """
    Sanitize and validate short id format.

    A short id is exactly `length` characters drawn from `alphabet`.
    Anything else cannot exist in the store, so callers can answer
    "not found" without a lookup.

    Args:
        short_id: The path segment to check
        length: Expected length (default: settings.SHORT_ID_LENGTH)
        alphabet: Allowed characters (default: settings.SHORT_ID_ALPHABET)

    Returns:
        Sanitized short id if valid, None otherwise
    """
    if not short_id or not isinstance(short_id, str):
        return None

    length = length or settings.SHORT_ID_LENGTH
    alphabet = alphabet or settings.SHORT_ID_ALPHABET

    if len(short_id) != length:
        return None

    if any(char not in alphabet for char in short_id):
        return None

    return short_id
