"""Finnhub fetcher.

Endpoint: https://finnhub.io/api/v1/quote?symbol={SYMBOL}
Rate Limit: 60 calls/minute (free tier)
API Key: Required
"""

import logging

from .base import BaseFetcher, FetcherError, register_fetcher

logger = logging.getLogger(__name__)


@register_fetcher
class FinnhubFetcher(BaseFetcher):
    """Fetcher for the Finnhub quote API.

    The current price is the ``c`` field. Finnhub answers unknown symbols
    with all-zero quotes, which are treated as a failed fetch.
    API key is REQUIRED.
    """

    name = "finnhub"
    label = "Finnhub"
    requires_api_key = True
    BASE_URL = "https://finnhub.io/api/v1"

    async def fetch(self, symbol: str) -> float | None:
        """Fetch the latest price from Finnhub.

        :param symbol: Asset ticker (e.g., "TSLA").
        :returns: Current price or None on failure.
        """
        try:
            api_key = self.require_api_key()
            response = await self._get(
                f"{self.BASE_URL}/quote",
                params={"symbol": symbol.upper()},
                headers={"X-Finnhub-Token": api_key},
            )
            data = response.json()

            price = float(data["c"])
            if price <= 0:
                logger.warning(f"[finnhub] No quote for {symbol}: {data}")
                return None
            return price

        except FetcherError as e:
            logger.warning(f"[finnhub] Failed to fetch {symbol}: {e}")
            return None
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"[finnhub] Failed to parse response for {symbol}: {e}")
            return None
