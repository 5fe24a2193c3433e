"""Alpha Vantage fetcher.

Endpoint: https://www.alphavantage.co/query?function=GLOBAL_QUOTE&symbol={SYMBOL}
Rate Limit: 25 calls/day (free tier)
API Key: Required
"""

import logging

from .base import BaseFetcher, FetcherError, register_fetcher

logger = logging.getLogger(__name__)


@register_fetcher
class AlphaVantageFetcher(BaseFetcher):
    """Fetcher for the Alpha Vantage GLOBAL_QUOTE endpoint.

    Rate-limited responses come back as HTTP 200 with a ``Note`` or
    ``Information`` field instead of a quote.
    API key is REQUIRED.
    """

    name = "alphavantage"
    label = "Alpha Vantage"
    requires_api_key = True
    BASE_URL = "https://www.alphavantage.co/query"

    async def fetch(self, symbol: str) -> float | None:
        """Fetch the latest price from Alpha Vantage.

        :param symbol: Asset ticker (e.g., "TSLA").
        :returns: Current price or None on failure.
        """
        try:
            api_key = self.require_api_key()
            response = await self._get(
                self.BASE_URL,
                params={
                    "function": "GLOBAL_QUOTE",
                    "symbol": symbol.upper(),
                    "apikey": api_key,
                },
            )
            data = response.json()

            quote = data.get("Global Quote")
            if not quote:
                logger.warning(f"[alphavantage] No quote for {symbol}: {data}")
                return None

            return float(quote["05. price"])

        except FetcherError as e:
            logger.warning(f"[alphavantage] Failed to fetch {symbol}: {e}")
            return None
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"[alphavantage] Failed to parse response for {symbol}: {e}")
            return None
