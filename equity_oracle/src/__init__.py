"""
Equity Price Oracle - Single-Asset Aggregation Module

This module provides a price oracle for one asset:
- PriceOracle: Role-gated oracle facade (reads, updates, simulation)
- PriceLedger: Latest slot plus bounded append-only history
- ConsensusEngine: Lower-median consensus over submitted quotes
- AccessControl: Owner / data provider roles
- MarketSimulator: Seeded synthetic price moves
- OracleFeeder: Fetch-then-submit rounds from market data sources
- fetchers: Modular quote fetcher implementations
"""

from .AccessControl import ZERO_ADDRESS, AccessControl
from .ConsensusEngine import ConsensusEngine, consensus_label, lower_median
from .errors import (
    InvalidArgumentError,
    NoDataError,
    OracleError,
    StalePriceError,
    UnauthorizedError,
)
from .Freshness import STALE_THRESHOLD, is_fresh
from .MarketSimulator import MarketSimulator, SimulatedMove
from .OracleFeeder import FeedRound, OracleFeeder
from .PriceChange import CHANGE_WINDOW, PriceChange
from .PriceLedger import PriceLedger
from .PriceObservation import (
    PRICE_DECIMALS,
    PriceObservation,
    format_price,
    from_fixed_point,
    to_fixed_point,
)
from .PriceOracle import DEFAULT_SYMBOL, PriceData, PriceOracle
from .QuoteCoordinator import QuoteCoordinator

__all__ = [
    "AccessControl",
    "CHANGE_WINDOW",
    "ConsensusEngine",
    "DEFAULT_SYMBOL",
    "FeedRound",
    "InvalidArgumentError",
    "MarketSimulator",
    "NoDataError",
    "OracleError",
    "OracleFeeder",
    "PRICE_DECIMALS",
    "PriceChange",
    "PriceData",
    "PriceLedger",
    "PriceObservation",
    "PriceOracle",
    "QuoteCoordinator",
    "STALE_THRESHOLD",
    "SimulatedMove",
    "StalePriceError",
    "UnauthorizedError",
    "ZERO_ADDRESS",
    "consensus_label",
    "format_price",
    "from_fixed_point",
    "is_fresh",
    "lower_median",
    "to_fixed_point",
]
