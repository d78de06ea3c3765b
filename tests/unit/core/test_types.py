"""Unit tests for the category enumeration."""

import pytest

from easynews.core.types import (
    CATEGORY_KEYS,
    DEFAULT_CATEGORY,
    LIFESTYLE_CATEGORIES,
    normalize_category,
)


class TestCategories:
    """Tests for category constants."""

    def test_keys(self) -> None:
        """Six categories, 'other' last and default."""
        assert CATEGORY_KEYS == ["serious", "sports", "screen", "culture", "fun", "other"]
        assert DEFAULT_CATEGORY == "other"

    def test_lifestyle_subset(self) -> None:
        """Lifestyle categories exclude serious and other."""
        assert set(LIFESTYLE_CATEGORIES) <= set(CATEGORY_KEYS)
        assert "serious" not in LIFESTYLE_CATEGORIES


class TestNormalizeCategory:
    """Tests for normalize_category()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("sports", "sports"),
            (" Culture ", "culture"),
            ("weather", "other"),
            ("", "other"),
            (None, "other"),
            (3, "other"),
        ],
    )
    def test_normalize(self, value, expected) -> None:
        assert normalize_category(value) == expected
