#!/usr/bin/env python3
"""Equity Price Oracle.

Builds a single-asset oracle, feeds it quotes fetched from several market
data sources (median consensus when two or more answer), optionally runs
synthetic market moves, and reports the resulting price data.

Run with ``python -m equity_oracle.main``. See ``--help`` for configuration.
"""

import argparse
import asyncio
import logging
import os
import random
import sys

from eth_account import Account
from eth_keys.exceptions import ValidationError

from .src.errors import OracleError
from .src.fetchers import BaseFetcher, get_available_fetchers, get_fetcher
from .src.OracleFeeder import OracleFeeder
from .src.PriceLedger import PriceLedger
from .src.PriceObservation import format_price
from .src.PriceOracle import DEFAULT_SYMBOL, PriceOracle

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_api_keys(api_key_str: str | None) -> dict[str, str]:
    """Parse comma-separated API key string into a dictionary.

    Format: source1=key1,source2=key2
    Example: finnhub=abc123,alphavantage=xyz789

    :param api_key_str: Comma-separated API key string.
    :returns: Dict mapping source names to API keys.
    """
    if not api_key_str:
        return {}

    api_keys = {}
    for item in api_key_str.split(","):
        item = item.strip()
        if "=" in item:
            source, key = item.split("=", 1)
            api_keys[source.strip().lower()] = key.strip()
    return api_keys


def parse_env_api_keys(environ: dict[str, str] | None = None) -> dict[str, str]:
    """Parse API keys from individual environment variables.

    Looks for: API_KEY_FINNHUB, API_KEY_ALPHAVANTAGE, etc.

    :param environ: Mapping to read from (default: os.environ).
    :returns: Dict mapping source names to API keys.
    """
    environ = os.environ if environ is None else environ
    api_keys = {}
    prefixes = ["API_KEY_", "APIKEY_"]

    for key, value in environ.items():
        for prefix in prefixes:
            if key.startswith(prefix) and value:
                source = key[len(prefix):].lower()
                api_keys[source] = value
                break

    return api_keys


def build_fetchers(
    sources: list[str], api_keys: dict[str, str], fetch_timeout: float
) -> dict[str, BaseFetcher]:
    """Instantiate fetchers, skipping those that need a missing API key.

    :param sources: Source names in preference order.
    :param api_keys: Dict mapping source names to API keys.
    :param fetch_timeout: Request timeout in seconds.
    :returns: Dict mapping source names to fetchers.
    """
    fetchers: dict[str, BaseFetcher] = {}
    for source in sources:
        fetcher = get_fetcher(source, api_key=api_keys.get(source), timeout=fetch_timeout)
        if fetcher.requires_api_key and not fetcher.has_api_key:
            logger.warning(f"[{source}] API key required but not provided, skipping")
            continue
        fetchers[source] = fetcher
    return fetchers


async def run_oracle(
    oracle: PriceOracle,
    feeder: OracleFeeder,
    rounds: int,
    period: float,
    simulations: int,
) -> None:
    """Run feeder rounds, then extra simulations, then report.

    :param oracle: Oracle to drive.
    :param feeder: Feeder submitting fetched quotes.
    :param rounds: Number of fetch rounds.
    :param period: Seconds between fetch rounds.
    :param simulations: Number of market simulations after the rounds.
    """
    try:
        await feeder.run(rounds=rounds, period=period)
    finally:
        # Clean up shared HTTP client
        await BaseFetcher.close_shared_client()

    for i in range(simulations):
        observation = oracle.simulate_market_data(feeder.caller)
        logger.info(f"Simulation {i + 1}/{simulations}: {format_price(observation.value)}")

    data = oracle.get_price_data()
    change = oracle.get_price_change()

    logger.info("=" * 60)
    logger.info(f"Symbol:            {data.symbol}")
    logger.info(f"Price:             {oracle.get_formatted_price()}")
    logger.info(f"Source:            {data.source}")
    logger.info(f"Fresh:             {data.fresh}")
    logger.info(f"Updated:           {data.timestamp}")
    if change.available:
        logger.info(f"24h Change:        {change.percent:+.2f}%")
    else:
        logger.info("24h Change:        not enough historical data")
    logger.info("=" * 60)


def main() -> None:
    """Main entry point for the Equity Price Oracle CLI."""
    available_sources = get_available_fetchers()

    parser = argparse.ArgumentParser(
        description="Equity Price Oracle: median consensus over market data sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available price sources:
  {', '.join(available_sources)}

Examples:
  # One round against the free sources
  python -m equity_oracle.main --sources yahoo,static

  # Three rounds a minute apart, with keyed sources
  python -m equity_oracle.main --rounds 3 --fetch-period 60 \\
      --sources yahoo,finnhub,alphavantage \\
      --api-keys finnhub=your-key,alphavantage=your-key

  # Offline demo with reproducible market simulation
  python -m equity_oracle.main --sources static --simulations 5 --seed 42

Environment variables (CLI args take precedence):
  SYMBOL, SOURCES, ROUNDS, FETCH_PERIOD, FETCH_TIMEOUT, SIMULATIONS, SEED,
  HISTORY_LIMIT, OWNER_KEY, PROVIDER_KEY, API_KEYS, API_KEY_FINNHUB, etc.
""",
    )

    parser.add_argument(
        "--symbol",
        type=str,
        help=f"Asset ticker (default: {DEFAULT_SYMBOL})",
        default=os.environ.get("SYMBOL") or DEFAULT_SYMBOL,
    )

    parser.add_argument(
        "--sources",
        type=str,
        help=f"Comma-separated price sources. Available: {', '.join(available_sources)}",
        default=os.environ.get("SOURCES") or "yahoo,static",
    )

    parser.add_argument(
        "--rounds",
        type=int,
        help="Number of fetch-and-submit rounds (default: 1)",
        default=int(os.environ.get("ROUNDS") or "1"),
    )

    parser.add_argument(
        "--fetch-period",
        dest="fetch_period",
        type=float,
        help="Seconds between rounds (default: 60)",
        default=float(os.environ.get("FETCH_PERIOD") or "60"),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help="Timeout for individual fetch requests in seconds (default: 10.0)",
        default=float(os.environ.get("FETCH_TIMEOUT") or "10.0"),
    )

    parser.add_argument(
        "--simulations",
        type=int,
        help="Synthetic market moves to run after the rounds (default: 0)",
        default=int(os.environ.get("SIMULATIONS") or "0"),
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the market simulator (default: unseeded)",
        default=int(os.environ["SEED"]) if os.environ.get("SEED") else None,
    )

    parser.add_argument(
        "--history-limit",
        dest="history_limit",
        type=int,
        help=(
            "Observations kept in memory; must cover 24h of updates for the "
            f"24h change (default: {PriceLedger.DEFAULT_HISTORY_LIMIT})"
        ),
        default=int(
            os.environ.get("HISTORY_LIMIT") or str(PriceLedger.DEFAULT_HISTORY_LIMIT)
        ),
    )

    parser.add_argument(
        "--owner-key",
        dest="owner_key",
        type=str,
        help="Private key of the oracle owner (default: a fresh random account)",
        default=os.environ.get("OWNER_KEY"),
    )

    parser.add_argument(
        "--provider-key",
        dest="provider_key",
        type=str,
        help="Private key of a separate data provider (default: owner submits)",
        default=os.environ.get("PROVIDER_KEY"),
    )

    parser.add_argument(
        "--api-keys",
        dest="api_keys",
        type=str,
        help="Comma-separated API keys (e.g., finnhub=abc,alphavantage=xyz)",
        default=os.environ.get("API_KEYS"),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate arguments
    if args.rounds < 0:
        parser.error("--rounds must not be negative")

    if args.simulations < 0:
        parser.error("--simulations must not be negative")

    if args.fetch_period < 0:
        parser.error("--fetch-period must not be negative")

    if args.history_limit < 1:
        parser.error("--history-limit must be at least 1")

    sources = [s.strip().lower() for s in args.sources.split(",") if s.strip()]
    if not sources:
        parser.error("At least one source must be specified")

    invalid_sources = [s for s in sources if s not in available_sources]
    if invalid_sources:
        parser.error(
            f"Unknown sources: {invalid_sources}. "
            f"Available: {', '.join(available_sources)}"
        )

    # Parse API keys (CLI + environment)
    api_keys = parse_env_api_keys()
    api_keys.update(parse_api_keys(args.api_keys))

    try:
        owner = Account.from_key(args.owner_key) if args.owner_key else Account.create()
        provider = Account.from_key(args.provider_key) if args.provider_key else None
    except (ValueError, ValidationError) as e:
        parser.error(f"Invalid private key: {e}")

    fetchers = build_fetchers(sources, api_keys, args.fetch_timeout)

    # Log configuration
    logger.info("=" * 60)
    logger.info("Equity Price Oracle")
    logger.info("=" * 60)
    logger.info(f"Symbol:            {args.symbol}")
    logger.info(f"Owner:             {owner.address}")
    logger.info(f"Data Provider:     {provider.address if provider else owner.address}")
    logger.info(f"Sources:           {', '.join(fetchers) or 'none'}")
    logger.info(f"Rounds:            {args.rounds}")
    logger.info(f"Fetch Period:      {args.fetch_period}s")
    logger.info(f"Fetch Timeout:     {args.fetch_timeout}s")
    logger.info(f"Simulations:       {args.simulations}")
    logger.info(f"Seed:              {args.seed if args.seed is not None else 'random'}")
    if api_keys:
        logger.info(f"API Keys:          {', '.join(api_keys.keys())}")
    logger.info("=" * 60)

    try:
        oracle = PriceOracle(
            owner=owner.address,
            symbol=args.symbol.upper(),
            rng=random.Random(args.seed),
            history_limit=args.history_limit,
        )

        caller = owner.address
        if provider is not None:
            caller = oracle.set_data_provider(owner.address, provider.address)

        feeder = OracleFeeder(
            oracle=oracle,
            caller=caller,
            fetchers=fetchers,
            fetch_timeout=args.fetch_timeout,
        )
        asyncio.run(
            run_oracle(
                oracle,
                feeder,
                rounds=args.rounds,
                period=args.fetch_period,
                simulations=args.simulations,
            )
        )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except OracleError as e:
        logger.error(f"Oracle error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
