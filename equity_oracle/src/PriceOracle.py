"""PriceOracle: Single-asset price oracle exposed to providers and consumers.

This module ties the oracle components together behind one constructed
object:

Architecture:
    - AccessControl gates every write (owner / data provider)
    - ConsensusEngine validates submissions and commits into the PriceLedger
    - MarketSimulator derives synthetic updates from the latest price
    - Freshness and PriceChange read from the PriceLedger
    - Time comes from an injected clock, truncated to whole seconds

Each instance owns its own ledger and roles, so independent oracles can live
side by side (for example one per test).

.. code-block:: python

    >>> oracle = PriceOracle(owner="0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266")
    >>> oracle.get_formatted_price()
    '$315.35'
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from .AccessControl import AccessControl
from .ConsensusEngine import ConsensusEngine
from .errors import NoDataError, StalePriceError
from .Freshness import STALE_THRESHOLD, observation_age
from .MarketSimulator import SIMULATION_SOURCE, MarketSimulator
from .PriceChange import CHANGE_WINDOW, PriceChange, change_over_window
from .PriceLedger import PriceLedger, UpdateListener
from .PriceObservation import (
    PRICE_DECIMALS,
    PriceObservation,
    format_price,
    to_fixed_point,
)

logger = logging.getLogger(__name__)

DEFAULT_SYMBOL = "TSLA"

# Bootstrap observation committed at construction.
INITIAL_PRICE = to_fixed_point("315.35")
INITIAL_SOURCE = "Initial Price"


@dataclass(frozen=True)
class PriceData:
    """Snapshot returned by :meth:`PriceOracle.get_price_data`.

    :ivar value: Latest fixed-point price.
    :ivar timestamp: Time of the latest observation.
    :ivar fresh: Whether the latest observation is within the threshold.
    :ivar source: Source label of the latest observation.
    :ivar symbol: Asset symbol.
    """

    value: int
    timestamp: int
    fresh: bool
    source: str
    symbol: str


class PriceOracle:
    """Price oracle for a single asset.

    :cvar DECIMALS: Implied fractional digits of every price value.
    :cvar STALE_THRESHOLD: Maximum age in seconds of a fresh price.
    :ivar symbol: Asset symbol.
    :ivar ledger: Underlying price ledger.
    :ivar access: Role guard.
    """

    DECIMALS = PRICE_DECIMALS
    STALE_THRESHOLD = STALE_THRESHOLD

    def __init__(
        self,
        owner: str,
        symbol: str = DEFAULT_SYMBOL,
        initial_price: int = INITIAL_PRICE,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
        history_limit: int = PriceLedger.DEFAULT_HISTORY_LIMIT,
        archive: UpdateListener | None = None,
    ) -> None:
        """Initialize the oracle and seed it with a bootstrap observation.

        :param owner: Owner address; also the initial data provider.
        :param symbol: Asset symbol (default: "TSLA").
        :param initial_price: Fixed-point bootstrap price (default: 315.35).
        :param clock: Callable returning the current Unix time (default: time.time).
        :param rng: Random generator for market simulation.
        :param history_limit: Number of observations kept in memory.
        :param archive: Optional callback receiving observations evicted
            from memory.
        :raises InvalidArgumentError: If owner or initial_price is invalid.
        """
        self.symbol = symbol
        self.clock = clock or time.time
        self.access = AccessControl(owner)
        self.ledger = PriceLedger(history_limit=history_limit, archive=archive)
        self.engine = ConsensusEngine(self.ledger)
        self.simulator = MarketSimulator(rng)

        self.ledger.subscribe(self._log_update)
        self.engine.submit_single(initial_price, INITIAL_SOURCE, self._now())

        logger.info(
            f"PriceOracle initialized: symbol={self.symbol}, owner={self.owner}, "
            f"price={self.get_formatted_price()}"
        )

    @property
    def owner(self) -> str:
        """Owner address."""
        return self.access.owner

    @property
    def data_provider(self) -> str:
        """Current data provider address."""
        return self.access.data_provider

    def _now(self) -> int:
        return int(self.clock())

    def _log_update(self, observation: PriceObservation) -> None:
        logger.info(
            f"{self.symbol}: price updated to {format_price(observation.value)} "
            f"at {observation.timestamp} ({observation.source})"
        )

    def get_price(self) -> int:
        """Return the latest price, refusing stale data.

        :returns: Fixed-point price.
        :raises NoDataError: If nothing has been committed.
        :raises StalePriceError: If the latest price is older than the threshold.
        """
        if self.ledger.is_empty:
            raise NoDataError("No price data available")

        now = self._now()
        latest, fresh = self.ledger.read(now, self.STALE_THRESHOLD)
        if not fresh:
            raise StalePriceError(
                observation_age(now, latest.timestamp), self.STALE_THRESHOLD
            )
        return latest.value

    def get_price_data(self) -> PriceData:
        """Return the latest price with its metadata. Never raises.

        :returns: PriceData snapshot including the freshness flag.
        """
        latest, fresh = self.ledger.read(self._now(), self.STALE_THRESHOLD)
        return PriceData(
            value=latest.value,
            timestamp=latest.timestamp,
            fresh=fresh,
            source=latest.source,
            symbol=self.symbol,
        )

    def get_formatted_price(self) -> str:
        """Return the latest price as a display string like ``$315.35``."""
        return format_price(self.ledger.latest.value)

    def get_historical_price(self, timestamp: int) -> PriceObservation:
        """Return the observation committed at an exact second.

        :param timestamp: Commit time to look up.
        :returns: Observation, or the invalid sentinel if none exists.
        """
        return self.ledger.get_at(timestamp)

    def get_price_change(self, window: int = CHANGE_WINDOW) -> PriceChange:
        """Return the change over a trailing window.

        Only observations still in memory are searched. When more than
        ``history_limit`` commits fall inside the window the reference has
        been evicted and the change reports as unavailable.

        :param window: Window length in seconds (default: 24 hours).
        :returns: PriceChange; check ``available`` to tell "no data" from
            "no change".
        """
        now = self._now()
        change = change_over_window(
            self.ledger.iter_newest_first(),
            self.ledger.latest,
            now,
            window,
        )
        if (
            not change.available
            and self.ledger.has_evicted
            and self.ledger.oldest.timestamp > now - window
        ):
            logger.warning(
                f"{self.symbol}: No reference for {window}s change in memory; "
                f"history_limit={self.ledger.history_limit} does not cover the window"
            )
        return change

    def get_price_change_24h(self) -> int:
        """Return the 24h change in basis points, or 0 if history is too short."""
        return self.get_price_change(CHANGE_WINDOW).basis_points

    def update_price(self, caller: str, value: int, source: str) -> PriceObservation:
        """Submit a single price quote.

        :param caller: Identity of the caller (provider or owner).
        :param value: Fixed-point price, must be positive.
        :param source: Non-empty source label.
        :returns: The committed observation.
        :raises UnauthorizedError: If caller lacks provider rights.
        :raises InvalidArgumentError: If value or source is invalid.
        """
        self.access.require_provider(caller)
        return self.engine.submit_single(value, source, self._now())

    def update_price_with_consensus(
        self, caller: str, values: Sequence[int], sources: Sequence[str]
    ) -> PriceObservation:
        """Submit quotes from several sources and commit their median.

        :param caller: Identity of the caller (provider or owner).
        :param values: Fixed-point quotes.
        :param sources: Source labels, one per quote.
        :returns: The committed observation.
        :raises UnauthorizedError: If caller lacks provider rights.
        :raises InvalidArgumentError: If the batch is malformed.
        """
        self.access.require_provider(caller)
        return self.engine.reconcile(values, sources, self._now())

    def set_price(self, caller: str, value: int) -> PriceObservation:
        """Manually override the price (owner only).

        :param caller: Identity of the caller (must be the owner).
        :param value: Fixed-point price, must be positive.
        :returns: The committed observation.
        :raises UnauthorizedError: If caller is not the owner.
        :raises InvalidArgumentError: If value is not positive.
        """
        self.access.require_owner(caller)
        return self.engine.override(value, self._now())

    def simulate_market_data(self, caller: str) -> PriceObservation:
        """Commit a synthetic move derived from the latest price.

        :param caller: Identity of the caller (provider or owner).
        :returns: The committed observation.
        :raises UnauthorizedError: If caller lacks provider rights.
        :raises NoDataError: If there is no price to move from.
        """
        self.access.require_provider(caller)
        if self.ledger.is_empty:
            raise NoDataError("No price data available")

        move = self.simulator.next_move(self.ledger.latest.value)
        logger.debug(
            f"{self.symbol}: simulated move draw={move.draw} bps={move.basis_points:+d}"
        )
        return self.ledger.commit(move.new_value, SIMULATION_SOURCE, self._now())

    def set_data_provider(self, caller: str, new_provider: str) -> str:
        """Reassign the data provider role (owner only).

        :param caller: Identity of the caller (must be the owner).
        :param new_provider: Address of the new provider.
        :returns: Checksummed address of the new provider.
        :raises UnauthorizedError: If caller is not the owner.
        :raises InvalidArgumentError: If new_provider is null or malformed.
        """
        return self.access.set_data_provider(caller, new_provider)
