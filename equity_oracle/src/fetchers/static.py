"""Constant stand-in feed.

Always quotes the same price. Useful offline and as a fallback source.
"""

from .base import BaseFetcher, register_fetcher


@register_fetcher
class StaticFetcher(BaseFetcher):
    """Fetcher that returns a fixed price for any symbol.

    :cvar DEFAULT_PRICE: Price returned when none is configured.
    :ivar price: The constant quote.
    """

    name = "static"
    label = "Static Feed"
    DEFAULT_PRICE = 315.35

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        price: float = DEFAULT_PRICE,
    ):
        """Initialize the fetcher.

        :param api_key: Ignored.
        :param timeout: Ignored.
        :param price: Constant price to return (default: 315.35).
        """
        super().__init__(api_key=api_key, timeout=timeout)
        self.price = price

    async def fetch(self, symbol: str) -> float | None:
        """Return the constant price.

        :param symbol: Asset ticker (ignored).
        :returns: The configured price.
        """
        return self.price
