"""PriceObservation: A single committed (value, timestamp, source) record.

Values are fixed-point integers with 18 implied fractional digits, the same
unit convention as wei, so conversion goes through web3's currency helpers.

.. code-block:: python

    >>> obs = PriceObservation(to_fixed_point("325.67"), 1700000000, "Yahoo")
    >>> format_price(obs.value)
    '$325.67'
    >>> PriceObservation.invalid().valid
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from web3 import Web3

# Number of implied fractional digits in a price value.
PRICE_DECIMALS = 18

ONE = 10**PRICE_DECIMALS


@dataclass(frozen=True)
class PriceObservation:
    """A committed price observation.

    :ivar value: Price as a fixed-point integer (18 decimals).
    :ivar timestamp: Commit time in whole seconds since epoch.
    :ivar source: Free-text label of where the price came from.
    :ivar valid: False only for the "not found" sentinel.
    """

    value: int
    timestamp: int
    source: str
    valid: bool = True

    @classmethod
    def invalid(cls) -> PriceObservation:
        """Return the sentinel used when a lookup finds nothing."""
        return cls(value=0, timestamp=0, source="", valid=False)

    @property
    def price(self) -> Decimal:
        """Price as a Decimal in whole currency units."""
        return from_fixed_point(self.value)


def to_fixed_point(price: int | float | str | Decimal) -> int:
    """Convert a human-readable price to an 18-decimal fixed-point integer.

    Floats are converted through their shortest string form so that
    ``315.35`` maps to exactly ``315350000000000000000``.

    :param price: Price in whole currency units.
    :returns: Fixed-point integer value.
    :raises ValueError: If the price is negative or not a number.
    """
    try:
        return int(Web3.to_wei(price, "ether"))
    except InvalidOperation as e:
        raise ValueError(f"Invalid price {price!r}") from e


def from_fixed_point(value: int) -> Decimal:
    """Convert an 18-decimal fixed-point integer back to whole units.

    :param value: Fixed-point integer value.
    :returns: Price as a Decimal.
    """
    return Decimal(Web3.from_wei(value, "ether"))


def format_price(value: int) -> str:
    """Render a price for display as ``$<dollars>.<cents>``.

    Cents are truncated to two digits and printed as a plain integer, so
    100.05 renders as ``$100.5`` and 100.00 as ``$100.0``.

    :param value: Fixed-point integer value.
    :returns: Display string.

    .. code-block:: python

        >>> format_price(to_fixed_point("100.05"))
        '$100.5'
    """
    dollars = value // ONE
    cents = (value % ONE) // 10 ** (PRICE_DECIMALS - 2)
    return f"${dollars}.{cents}"
