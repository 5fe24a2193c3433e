"""QuoteCoordinator: Concurrent quote fetching across sources.

Every configured source is queried at the same time with its own timeout.
A source that times out, raises, or returns a non-positive price is reported
as None so that one bad source never sinks the whole round.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .fetchers import BaseFetcher

logger = logging.getLogger(__name__)


class QuoteCoordinator:
    """Fetches the latest quote for one symbol from many sources.

    :ivar fetchers: Dict mapping source names to fetcher instances.
    :ivar fetch_timeout: Timeout for each fetch in seconds.
    """

    def __init__(
        self,
        fetchers: dict[str, BaseFetcher],
        fetch_timeout: float = 10.0,
    ) -> None:
        """Initialize the coordinator.

        :param fetchers: Dict mapping source names to fetcher instances.
        :param fetch_timeout: Timeout for each fetch (default: 10.0).
        """
        self.fetchers = fetchers
        self.fetch_timeout = fetch_timeout

    async def fetch_all(
        self, symbol: str, sources: list[str] | None = None
    ) -> dict[str, float | None]:
        """Fetch quotes for a symbol from all (or the given) sources.

        :param symbol: Asset ticker.
        :param sources: Optional subset of source names. Defaults to all.
        :returns: Dict mapping source name to price or None, in source order.
        """
        names = list(self.fetchers) if sources is None else sources
        if not names:
            return {}

        tasks = [self._fetch_single(name, symbol) for name in names]
        prices = await asyncio.gather(*tasks)
        return dict(zip(names, prices, strict=True))

    async def _fetch_single(self, source: str, symbol: str) -> float | None:
        """Fetch one quote with timeout.

        :param source: Source name.
        :param symbol: Asset ticker.
        :returns: Price or None on failure.
        """
        fetcher = self.fetchers.get(source)
        if fetcher is None:
            logger.warning(f"[{source}] No fetcher configured")
            return None

        try:
            price = await asyncio.wait_for(
                fetcher.fetch(symbol),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[{source}] Timeout fetching {symbol}")
            return None
        except Exception as e:
            logger.warning(f"[{source}] Error fetching {symbol}: {e}")
            return None

        if price is None or price <= 0:
            return None
        return price
