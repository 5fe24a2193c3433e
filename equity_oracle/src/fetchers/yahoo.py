"""Yahoo Finance fetcher.

Endpoint: https://query1.finance.yahoo.com/v8/finance/chart/{SYMBOL}
Rate Limit: Unpublished (no key required)
"""

import logging

from .base import BaseFetcher, FetcherError, register_fetcher

logger = logging.getLogger(__name__)


@register_fetcher
class YahooFetcher(BaseFetcher):
    """Fetcher for the Yahoo Finance chart API.

    Reads ``regularMarketPrice`` from the chart metadata.
    No API key required.
    """

    name = "yahoo"
    label = "Yahoo Finance"
    BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"

    async def fetch(self, symbol: str) -> float | None:
        """Fetch the latest price from Yahoo Finance.

        :param symbol: Asset ticker (e.g., "TSLA").
        :returns: Current price or None on failure.
        """
        url = f"{self.BASE_URL}/{symbol.upper()}"

        try:
            response = await self._get(url, params={"interval": "1d", "range": "1d"})
            data = response.json()

            result = (data.get("chart") or {}).get("result") or []
            if not result:
                logger.warning(f"[yahoo] No chart result for {symbol}: {data}")
                return None

            return float(result[0]["meta"]["regularMarketPrice"])

        except FetcherError as e:
            logger.warning(f"[yahoo] Failed to fetch {symbol}: {e}")
            return None
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"[yahoo] Failed to parse response for {symbol}: {e}")
            return None
