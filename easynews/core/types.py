"""Common type definitions for the application.

This module provides the closed category enumeration shared by the
collector, the allocator, the output builder and the digest generators.
"""

from enum import Enum


class Category(str, Enum):
    """Presentation categories of a finished article."""

    SERIOUS = "serious"
    SPORTS = "sports"
    SCREEN = "screen"
    CULTURE = "culture"
    FUN = "fun"
    OTHER = "other"


CATEGORY_KEYS: list[str] = [c.value for c in Category]

# Safe default for malformed or unknown classifier output
DEFAULT_CATEGORY = Category.OTHER.value

LIFESTYLE_CATEGORIES: list[str] = [
    Category.SPORTS.value,
    Category.SCREEN.value,
    Category.CULTURE.value,
    Category.FUN.value,
]


def normalize_category(value: object) -> str:
    """Map an arbitrary value onto the closed category enumeration.

    Args:
        value: Raw category value (usually from an LLM response)

    Returns:
        A valid category key; DEFAULT_CATEGORY when the value is unknown
    """
    if isinstance(value, str):
        key = value.strip().lower()
        if key in CATEGORY_KEYS:
            return key
    return DEFAULT_CATEGORY


__all__ = [
    "Category",
    "CATEGORY_KEYS",
    "DEFAULT_CATEGORY",
    "LIFESTYLE_CATEGORIES",
    "normalize_category",
]
