"""ConsensusEngine: Reduces submitted quotes to one committed price.

Algorithm for a consensus batch:
    1. Reject mismatched lengths, fewer than two quotes, or any non-positive quote
    2. Sort values ascending
    3. Take the middle element; for even counts the lower-middle one (no averaging)
    4. Commit it under the label "Consensus(<sources joined by ','>)"

.. code-block:: python

    >>> lower_median([310, 320, 315])
    315
    >>> lower_median([100, 200, 300, 400])
    200
    >>> consensus_label(["API1", "API2"])
    'Consensus(API1,API2)'
"""

from __future__ import annotations

from statistics import median_low
from typing import Iterable, Sequence

from .errors import InvalidArgumentError
from .PriceLedger import PriceLedger
from .PriceObservation import PriceObservation

MIN_CONSENSUS_SOURCES = 2

MANUAL_OVERRIDE_SOURCE = "Manual Override"


def lower_median(values: Iterable[int]) -> int:
    """Return the median, picking the lower-middle element for even counts.

    :param values: Non-empty iterable of integers.
    :returns: The median value.
    :raises statistics.StatisticsError: If values is empty.
    """
    return median_low(values)


def consensus_label(sources: Sequence[str]) -> str:
    """Build the composite source label for a consensus commit."""
    return f"Consensus({','.join(sources)})"


def validate_price(value: int) -> None:
    """Reject non-positive prices.

    :raises InvalidArgumentError: If value is not a positive integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError("Invalid price")


class ConsensusEngine:
    """Validates submissions and commits them to a ledger.

    :ivar ledger: Ledger receiving the commits.
    """

    def __init__(self, ledger: PriceLedger) -> None:
        """Initialize the engine.

        :param ledger: Ledger to commit into.
        """
        self.ledger = ledger

    def reconcile(
        self, values: Sequence[int], sources: Sequence[str], now: int
    ) -> PriceObservation:
        """Commit the median of a batch of concurrently submitted quotes.

        :param values: Fixed-point quotes, one per source.
        :param sources: Source labels in the same order as values.
        :param now: Commit time in whole seconds.
        :returns: The committed observation.
        :raises InvalidArgumentError: On mismatched lengths, fewer than two
            quotes, or a non-positive quote.
        """
        if len(values) != len(sources):
            raise InvalidArgumentError("Arrays length mismatch")
        if len(values) < MIN_CONSENSUS_SOURCES:
            raise InvalidArgumentError(
                f"Need at least {MIN_CONSENSUS_SOURCES} sources"
            )
        for value in values:
            validate_price(value)

        return self.ledger.commit(
            lower_median(values), consensus_label(sources), now
        )

    def submit_single(self, value: int, source: str, now: int) -> PriceObservation:
        """Commit a single quote.

        :param value: Fixed-point price.
        :param source: Non-empty source label.
        :param now: Commit time in whole seconds.
        :returns: The committed observation.
        :raises InvalidArgumentError: If value is not positive or source is empty.
        """
        validate_price(value)
        if not source:
            raise InvalidArgumentError("Source required")
        return self.ledger.commit(value, source, now)

    def override(self, value: int, now: int) -> PriceObservation:
        """Commit a manual price under the fixed "Manual Override" label.

        Access checks are the caller's job; the price must still be positive.

        :param value: Fixed-point price.
        :param now: Commit time in whole seconds.
        :returns: The committed observation.
        :raises InvalidArgumentError: If value is not positive.
        """
        validate_price(value)
        return self.ledger.commit(value, MANUAL_OVERRIDE_SOURCE, now)
