"""Shared validators for Pydantic config models.

This module provides common validation utilities used across
configuration models:
- String list normalization
- Category list validation
"""

from typing import Any

from easynews.core.types import CATEGORY_KEYS


def normalize_string_list(value: Any) -> list[str]:
    """Normalize string list to lowercase.

    Handles None, single strings, and lists.

    Args:
        value: Input value (None, str, or list[str])

    Returns:
        List of lowercased, stripped strings
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip().lower()]
    if isinstance(value, list):
        return [s.strip().lower() for s in value if isinstance(s, str) and s.strip()]
    return []


def validate_category_list(values: list[str], field_name: str = "Categories") -> list[str]:
    """Validate that every value is a known category key, dedupe keeping order.

    Args:
        values: Category keys to validate (already lowercased)
        field_name: Name for error messages

    Returns:
        Deduplicated list in original order

    Raises:
        ValueError: If any value is not a known category
    """
    unknown = [v for v in values if v not in CATEGORY_KEYS]
    if unknown:
        raise ValueError(
            f"{field_name} must be among {CATEGORY_KEYS}. Invalid values: {unknown}"
        )
    return list(dict.fromkeys(values))


__all__ = [
    "normalize_string_list",
    "validate_category_list",
]
