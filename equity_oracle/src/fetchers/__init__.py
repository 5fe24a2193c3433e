"""
Quote fetchers for the oracle's data sources.

This module provides a unified interface for fetching the latest equity
quote from market data APIs.

Usage:
    from equity_oracle.src.fetchers import get_fetcher, get_available_fetchers

    # Get list of available fetchers
    available = get_available_fetchers()
    # ['alphavantage', 'finnhub', 'static', 'yahoo']

    # Create a fetcher instance
    fetcher = get_fetcher("yahoo")
    price = await fetcher.fetch("TSLA")

    # For fetchers requiring API keys
    fetcher = get_fetcher("finnhub", api_key="your-api-key")
"""

# Import base classes and utilities
from .base import (
    FETCHER_REGISTRY,
    BaseFetcher,
    FetcherConfigError,
    FetcherError,
    FetcherHTTPError,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)

# Import all fetcher implementations to trigger registration
from .alphavantage import AlphaVantageFetcher
from .finnhub import FinnhubFetcher
from .static import StaticFetcher
from .yahoo import YahooFetcher

__all__ = [
    # Base classes
    "BaseFetcher",
    "FetcherError",
    "FetcherConfigError",
    "FetcherHTTPError",
    # Registry functions
    "register_fetcher",
    "get_fetcher",
    "get_available_fetchers",
    "FETCHER_REGISTRY",
    # Fetcher implementations
    "AlphaVantageFetcher",
    "FinnhubFetcher",
    "StaticFetcher",
    "YahooFetcher",
]
