"""MarketSimulator: Synthetic price moves for demoing without live feeds.

A draw in [0, 1000) selects a magnitude band and its parity selects the
direction:

    ===========  ==========  ==========
    draw         increase    decrease
    ===========  ==========  ==========
    [0, 100)     +300 bps    -200 bps
    [100, 300)   +150 bps    -100 bps
    [300, 1000)  +50 bps     -30 bps
    ===========  ==========  ==========

Even draws increase the price, odd draws decrease it. A decrease never takes
the price below half of its previous value.

.. code-block:: python

    >>> sim = MarketSimulator(random.Random(7))
    >>> move = sim.next_move(315 * 10**18)
    >>> move.new_value > 0
    True
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .PriceChange import BASIS_POINTS

SIMULATION_SOURCE = "Market Simulation"

DRAW_RANGE = 1000

# (upper bound of draw, increase bps, decrease bps)
MOVE_BANDS: tuple[tuple[int, int, int], ...] = (
    (100, 300, 200),
    (300, 150, 100),
    (DRAW_RANGE, 50, 30),
)


@dataclass(frozen=True)
class SimulatedMove:
    """A single simulated price move.

    :ivar draw: Random draw in [0, 1000).
    :ivar basis_points: Signed move applied to the previous value.
    :ivar previous_value: Value before the move.
    :ivar new_value: Value after the move.
    """

    draw: int
    basis_points: int
    previous_value: int
    new_value: int


def band_for(draw: int) -> tuple[int, int]:
    """Return (increase_bps, decrease_bps) for a draw.

    :raises ValueError: If draw is outside [0, 1000).
    """
    if not 0 <= draw < DRAW_RANGE:
        raise ValueError(f"draw must be in [0, {DRAW_RANGE}), got {draw}")
    for upper, up_bps, down_bps in MOVE_BANDS[:-1]:
        if draw < upper:
            return up_bps, down_bps
    _, up_bps, down_bps = MOVE_BANDS[-1]
    return up_bps, down_bps


def apply_move(value: int, draw: int) -> SimulatedMove:
    """Apply the move selected by draw to value."""
    up_bps, down_bps = band_for(draw)

    if draw % 2 == 0:
        new_value = value + value * up_bps // BASIS_POINTS
        bps = up_bps
    else:
        new_value = max(value - value * down_bps // BASIS_POINTS, value // 2)
        bps = -down_bps

    return SimulatedMove(
        draw=draw, basis_points=bps, previous_value=value, new_value=new_value
    )


class MarketSimulator:
    """Derives new prices from the previous one using an injected PRNG.

    :ivar rng: Random generator supplying the draws.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize the simulator.

        :param rng: Random generator. Pass a seeded one for reproducible runs.
        """
        self.rng = rng if rng is not None else random.Random()

    def draw(self) -> int:
        """Draw an integer in [0, 1000)."""
        return self.rng.randrange(DRAW_RANGE)

    def next_move(self, value: int) -> SimulatedMove:
        """Draw and apply one move to value."""
        return apply_move(value, self.draw())
