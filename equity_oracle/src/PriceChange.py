"""PriceChange: Percentage change over a trailing window, in basis points.

The reference observation is the newest one that is at least one window
old. With reference R and current C the change is
``(C - R) * 10000 / R`` truncated toward zero.

.. code-block:: python

    >>> basis_points_change(300, 330)
    1000
    >>> basis_points_change(300, 299)
    -33
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .PriceObservation import PriceObservation

# Default trailing window (24 hours).
CHANGE_WINDOW = 86400

BASIS_POINTS = 10000


def basis_points_change(reference: int, current: int) -> int:
    """Return the signed change from reference to current in basis points.

    Integer arithmetic, truncated toward zero. A zero reference yields 0.
    """
    if reference == 0:
        return 0
    magnitude = abs(current - reference) * BASIS_POINTS // abs(reference)
    negative = (current - reference < 0) != (reference < 0)
    return -magnitude if negative else magnitude


@dataclass(frozen=True)
class PriceChange:
    """Outcome of a trailing-window change query.

    :ivar basis_points: Signed change (0 when unavailable).
    :ivar reference: Observation used as the baseline, or None.
    :ivar window: Window length in seconds.
    """

    basis_points: int
    reference: PriceObservation | None
    window: int

    @property
    def available(self) -> bool:
        """False when history is too short to contain a reference."""
        return self.reference is not None

    @property
    def percent(self) -> float:
        """Change as a percentage (100 basis points == 1%)."""
        return self.basis_points / 100


def find_reference(
    observations_newest_first: Iterable[PriceObservation], cutoff: int
) -> PriceObservation | None:
    """Return the newest observation at or before cutoff, if any."""
    for observation in observations_newest_first:
        if observation.timestamp <= cutoff:
            return observation
    return None


def change_over_window(
    observations_newest_first: Iterable[PriceObservation],
    current: PriceObservation,
    now: int,
    window: int = CHANGE_WINDOW,
) -> PriceChange:
    """Compute the change of current against the price one window ago.

    :param observations_newest_first: History, newest first.
    :param current: The latest observation.
    :param now: Current time in whole seconds.
    :param window: Trailing window length in seconds.
    :returns: PriceChange; unavailable if no observation is old enough.
    :raises ValueError: If window is negative.
    """
    if window < 0:
        raise ValueError("window must not be negative")

    reference = find_reference(observations_newest_first, now - window)
    if reference is None:
        return PriceChange(basis_points=0, reference=None, window=window)

    return PriceChange(
        basis_points=basis_points_change(reference.value, current.value),
        reference=reference,
        window=window,
    )
