"""OracleFeeder: Fetch-then-submit rounds on behalf of a data provider.

Each round:
    1. Fetch quotes from every source concurrently
    2. Two or more quotes: submit them as a consensus batch (median)
    3. Exactly one quote: submit it as a single update
    4. No quotes: fall back to a market simulation (if enabled)

The feeder is an ordinary caller of the oracle. It holds an identity and is
subject to the same role checks as anyone else.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import OracleError
from .PriceObservation import PriceObservation, format_price, to_fixed_point
from .QuoteCoordinator import QuoteCoordinator

if TYPE_CHECKING:
    from .fetchers import BaseFetcher
    from .PriceOracle import PriceOracle

logger = logging.getLogger(__name__)

MODE_CONSENSUS = "consensus"
MODE_SINGLE = "single"
MODE_SIMULATION = "simulation"
MODE_SKIPPED = "skipped"


@dataclass
class FeedRound:
    """Outcome of one feeder round.

    :ivar mode: How the round updated the oracle (consensus, single,
        simulation or skipped).
    :ivar quotes: Raw quotes per source (None for failed sources).
    :ivar observation: Committed observation, or None if skipped.
    :ivar error: Error message if the oracle rejected the submission.
    """

    mode: str
    quotes: dict[str, float | None] = field(default_factory=dict)
    observation: PriceObservation | None = None
    error: str | None = None

    @property
    def committed(self) -> bool:
        """Check if the round changed the oracle."""
        return self.observation is not None


class OracleFeeder:
    """Feeds an oracle with quotes from several fetchers.

    :ivar oracle: Oracle receiving the updates.
    :ivar caller: Identity used for submissions.
    :ivar fetchers: Dict mapping source names to fetcher instances.
    :ivar simulate_on_empty: Whether to simulate when no quote arrives.
    """

    def __init__(
        self,
        oracle: PriceOracle,
        caller: str,
        fetchers: dict[str, BaseFetcher],
        fetch_timeout: float = 10.0,
        simulate_on_empty: bool = True,
    ) -> None:
        """Initialize the feeder.

        :param oracle: Oracle to update.
        :param caller: Provider (or owner) identity used for submissions.
        :param fetchers: Dict mapping source names to fetcher instances.
        :param fetch_timeout: Timeout for each fetch (default: 10.0).
        :param simulate_on_empty: Simulate a move when every source fails
            (default: True).
        """
        self.oracle = oracle
        self.caller = caller
        self.fetchers = fetchers
        self.simulate_on_empty = simulate_on_empty
        self.coordinator = QuoteCoordinator(fetchers, fetch_timeout=fetch_timeout)

    def _label(self, source: str) -> str:
        fetcher = self.fetchers.get(source)
        return fetcher.source_label if fetcher else source

    async def run_round(self) -> FeedRound:
        """Fetch quotes once and submit the result to the oracle.

        :returns: FeedRound describing what happened.
        """
        symbol = self.oracle.symbol
        quotes = await self.coordinator.fetch_all(symbol)
        valid = {s: p for s, p in quotes.items() if p is not None}

        if len(valid) >= 2:
            mode = MODE_CONSENSUS
        elif len(valid) == 1:
            mode = MODE_SINGLE
        elif self.simulate_on_empty:
            mode = MODE_SIMULATION
        else:
            logger.warning(f"{symbol}: No quotes received, skipping round")
            return FeedRound(mode=MODE_SKIPPED, quotes=quotes)

        try:
            if mode == MODE_CONSENSUS:
                values = [to_fixed_point(p) for p in valid.values()]
                labels = [self._label(s) for s in valid]
                observation = self.oracle.update_price_with_consensus(
                    self.caller, values, labels
                )
            elif mode == MODE_SINGLE:
                source, price = next(iter(valid.items()))
                observation = self.oracle.update_price(
                    self.caller, to_fixed_point(price), self._label(source)
                )
            else:
                logger.warning(f"{symbol}: No quotes received, simulating market move")
                observation = self.oracle.simulate_market_data(self.caller)
        except (OracleError, ValueError) as e:
            logger.warning(f"{symbol}: Submission rejected ({mode}): {e}")
            return FeedRound(mode=MODE_SKIPPED, quotes=quotes, error=str(e))

        quote_strs = [f"{s}=${p:.2f}" for s, p in valid.items()]
        logger.info(
            f"{symbol}: {format_price(observation.value)} via {mode} "
            f"(quotes=[{', '.join(quote_strs)}])"
        )
        return FeedRound(mode=mode, quotes=quotes, observation=observation)

    async def run(self, rounds: int = 1, period: float = 60.0) -> list[FeedRound]:
        """Run a fixed number of rounds, sleeping between them.

        :param rounds: Number of rounds (default: 1).
        :param period: Seconds to wait between rounds (default: 60).
        :returns: List of FeedRound results in order.
        """
        results: list[FeedRound] = []
        for i in range(rounds):
            logger.debug(f"Feeder round {i + 1}/{rounds}")
            results.append(await self.run_round())
            if i + 1 < rounds:
                await asyncio.sleep(period)
        return results
