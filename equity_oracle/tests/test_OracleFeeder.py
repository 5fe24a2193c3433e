"""Unit tests for OracleFeeder."""

import asyncio

from equity_oracle.src.MarketSimulator import SIMULATION_SOURCE
from equity_oracle.src.OracleFeeder import (
    MODE_CONSENSUS,
    MODE_SIMULATION,
    MODE_SINGLE,
    MODE_SKIPPED,
    OracleFeeder,
)
from equity_oracle.src.PriceObservation import to_fixed_point
from equity_oracle.src.PriceOracle import PriceOracle
from equity_oracle.tests.fakes import OWNER, PROVIDER, USER, FakeFetcher


class TestOracleFeederRound:
    """Test a single feeder round."""

    def test_consensus_round(self, oracle: PriceOracle) -> None:
        """Two or more quotes should be submitted as a consensus batch."""
        fetchers = {
            "a": FakeFetcher(330.0),
            "b": FakeFetcher(310.0),
            "c": FakeFetcher(320.0),
        }
        feeder = OracleFeeder(oracle, OWNER, fetchers)

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_CONSENSUS
        assert result.committed
        assert oracle.get_price() == to_fixed_point("320")
        assert oracle.get_price_data().source == (
            "Consensus(Fake Feed,Fake Feed,Fake Feed)"
        )

    def test_consensus_ignores_failed_sources(self, oracle: PriceOracle) -> None:
        """Failed sources are left out of the batch."""
        fetchers = {
            "a": FakeFetcher(300.0),
            "b": FakeFetcher(error=RuntimeError("down")),
            "c": FakeFetcher(302.0),
        }
        feeder = OracleFeeder(oracle, OWNER, fetchers)

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_CONSENSUS
        assert result.quotes["b"] is None
        # lower-middle of two
        assert oracle.get_price() == to_fixed_point("300")

    def test_single_round(self, oracle: PriceOracle) -> None:
        """Exactly one quote should be submitted as a single update."""
        fetchers = {"a": FakeFetcher(325.67), "b": FakeFetcher(None)}
        feeder = OracleFeeder(oracle, OWNER, fetchers)

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_SINGLE
        assert oracle.get_formatted_price() == "$325.67"
        assert oracle.get_price_data().source == "Fake Feed"

    def test_simulation_round(self, oracle: PriceOracle) -> None:
        """No quotes should fall back to a simulated move."""
        feeder = OracleFeeder(oracle, OWNER, {"a": FakeFetcher(None)})

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_SIMULATION
        assert result.observation.source == SIMULATION_SOURCE
        assert oracle.get_price_data().source == SIMULATION_SOURCE

    def test_skipped_round(self, oracle: PriceOracle) -> None:
        """With simulation disabled an empty round changes nothing."""
        before = oracle.get_price_data()
        feeder = OracleFeeder(oracle, OWNER, {}, simulate_on_empty=False)

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_SKIPPED
        assert not result.committed
        assert result.error is None
        assert oracle.get_price_data() == before

    def test_provider_caller(self, oracle: PriceOracle) -> None:
        """An assigned data provider may feed the oracle."""
        oracle.set_data_provider(OWNER, PROVIDER)
        feeder = OracleFeeder(oracle, PROVIDER, {"a": FakeFetcher(400.0)})

        result = asyncio.run(feeder.run_round())

        assert result.committed
        assert oracle.get_price() == to_fixed_point("400")

    def test_unauthorized_caller(self, oracle: PriceOracle) -> None:
        """Rejected submissions should be reported, not raised."""
        before = oracle.get_price_data()
        feeder = OracleFeeder(oracle, USER, {"a": FakeFetcher(400.0)})

        result = asyncio.run(feeder.run_round())

        assert result.mode == MODE_SKIPPED
        assert not result.committed
        assert "Only data provider" in result.error
        assert oracle.get_price_data() == before


class TestOracleFeederRun:
    """Test multi-round runs."""

    def test_run_rounds(self, oracle: PriceOracle) -> None:
        """run() should return one result per round."""
        fetcher = FakeFetcher(320.0)
        feeder = OracleFeeder(oracle, OWNER, {"a": fetcher})

        results = asyncio.run(feeder.run(rounds=3, period=0))

        assert [r.mode for r in results] == [MODE_SINGLE] * 3
        assert fetcher.calls == ["TSLA"] * 3

    def test_zero_rounds(self, oracle: PriceOracle) -> None:
        """Zero rounds should do nothing."""
        feeder = OracleFeeder(oracle, OWNER, {"a": FakeFetcher(320.0)})
        assert asyncio.run(feeder.run(rounds=0)) == []
