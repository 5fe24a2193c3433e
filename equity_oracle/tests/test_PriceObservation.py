"""Unit tests for PriceObservation and fixed-point helpers."""

from decimal import Decimal

import pytest

from equity_oracle.src.PriceObservation import (
    ONE,
    PriceObservation,
    format_price,
    from_fixed_point,
    to_fixed_point,
)


class TestFixedPoint:
    """Test fixed-point conversion."""

    def test_from_string(self) -> None:
        """Decimal strings should convert exactly."""
        assert to_fixed_point("315.35") == 315_350_000_000_000_000_000

    def test_from_float(self) -> None:
        """Floats should convert without binary rounding artifacts."""
        assert to_fixed_point(315.35) == 315_350_000_000_000_000_000

    def test_from_int(self) -> None:
        """Integers should scale by 10**18."""
        assert to_fixed_point(300) == 300 * ONE

    def test_back_to_decimal(self) -> None:
        """from_fixed_point should invert to_fixed_point."""
        assert from_fixed_point(to_fixed_point("325.67")) == Decimal("325.67")

    def test_invalid_string(self) -> None:
        """Non-numeric strings should raise ValueError."""
        with pytest.raises(ValueError):
            to_fixed_point("abc")


class TestFormatPrice:
    """Test display formatting."""

    def test_two_digit_cents(self) -> None:
        assert format_price(to_fixed_point("325.67")) == "$325.67"

    def test_cents_not_padded(self) -> None:
        """Single-digit cents are printed without a leading zero."""
        assert format_price(to_fixed_point("100.05")) == "$100.5"

    def test_whole_dollars(self) -> None:
        assert format_price(to_fixed_point("100")) == "$100.0"

    def test_truncates_sub_cent(self) -> None:
        """Fractions below one cent are dropped, not rounded."""
        assert format_price(to_fixed_point("12.349")) == "$12.34"


class TestPriceObservation:
    """Test the observation record."""

    def test_invalid_sentinel(self) -> None:
        """Sentinel should carry zeros and an empty source."""
        sentinel = PriceObservation.invalid()
        assert sentinel == PriceObservation(0, 0, "", False)

    def test_price_property(self) -> None:
        """price should expose whole currency units."""
        obs = PriceObservation(to_fixed_point("315.35"), 1, "x")
        assert obs.price == Decimal("315.35")
        assert obs.valid is True

    def test_frozen(self) -> None:
        """Observations are immutable."""
        obs = PriceObservation(1, 1, "x")
        with pytest.raises(AttributeError):
            obs.value = 2  # type: ignore[misc]
