"""Formatting utilities for menu output."""

from __future__ import annotations


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate a string to a maximum length, adding a suffix if truncated.

    Args:
        text: String to truncate.
        max_length: Maximum length including suffix.
        suffix: Suffix to add when truncating.

    Returns:
        Truncated string.

    Examples:
        >>> truncate_string("Hello World", 8)
        'Hello...'
        >>> truncate_string("Short", 10)
        'Short'
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(suffix):
        return suffix[:max_length]
    return text[:max_length - len(suffix)] + suffix


def or_dash(value) -> str:
    """Render empty values as '-' in tables."""
    if value in (None, ''):
        return '-'
    return str(value)
