"""Unit tests for ConsensusEngine."""

import statistics

import pytest

from equity_oracle.src.ConsensusEngine import (
    MANUAL_OVERRIDE_SOURCE,
    ConsensusEngine,
    consensus_label,
    lower_median,
)
from equity_oracle.src.errors import InvalidArgumentError
from equity_oracle.src.PriceLedger import PriceLedger


@pytest.fixture
def engine() -> ConsensusEngine:
    return ConsensusEngine(PriceLedger())


class TestLowerMedian:
    """Test the median rule."""

    def test_odd_count(self) -> None:
        """Odd count should take the middle element."""
        assert lower_median([320, 310, 315]) == 315

    def test_even_count_takes_lower_middle(self) -> None:
        """Even count should take the lower-middle element."""
        assert lower_median([400, 100, 300, 200]) == 200
        assert lower_median([2, 1]) == 1

    def test_single_value(self) -> None:
        """Single value is its own median."""
        assert lower_median([42]) == 42

    def test_duplicates(self) -> None:
        """Duplicates should not affect selection."""
        assert lower_median([5, 5, 1, 9]) == 5

    def test_empty(self) -> None:
        """Empty input should raise StatisticsError (a ValueError)."""
        with pytest.raises(statistics.StatisticsError):
            lower_median([])
        with pytest.raises(ValueError):
            lower_median([])

    def test_generator_input(self) -> None:
        """Any iterable of values should be accepted."""
        assert lower_median(v for v in (9, 3, 6, 1)) == 3

    def test_does_not_mutate_input(self) -> None:
        """Input order should be preserved."""
        values = [3, 1, 2]
        lower_median(values)
        assert values == [3, 1, 2]


class TestConsensusLabel:
    """Test label construction."""

    def test_input_order_preserved(self) -> None:
        """Sources should be joined in input order."""
        assert consensus_label(["B", "A"]) == "Consensus(B,A)"

    def test_no_dedup(self) -> None:
        """Duplicate sources should be kept."""
        assert consensus_label(["A", "A"]) == "Consensus(A,A)"


class TestReconcile:
    """Test ConsensusEngine.reconcile()."""

    def test_commits_median(self, engine: ConsensusEngine) -> None:
        """Median should be committed under the composite label."""
        observation = engine.reconcile([310, 315, 320], ["x", "y", "z"], now=5)

        assert observation.value == 315
        assert observation.source == "Consensus(x,y,z)"
        assert observation.timestamp == 5
        assert engine.ledger.latest == observation

    def test_deterministic(self) -> None:
        """Identical inputs should commit identical values."""
        results = []
        for _ in range(2):
            engine = ConsensusEngine(PriceLedger())
            results.append(engine.reconcile([7, 3, 9, 1], ["a", "b", "c", "d"], now=1))
        assert results[0] == results[1]

    def test_length_mismatch(self, engine: ConsensusEngine) -> None:
        """Mismatched arrays should be rejected."""
        with pytest.raises(InvalidArgumentError, match="Arrays length mismatch"):
            engine.reconcile([1, 2], ["a"], now=1)

    def test_too_few(self, engine: ConsensusEngine) -> None:
        """Fewer than two quotes should be rejected."""
        with pytest.raises(InvalidArgumentError, match="Need at least 2 sources"):
            engine.reconcile([1], ["a"], now=1)
        with pytest.raises(InvalidArgumentError, match="Need at least 2 sources"):
            engine.reconcile([], [], now=1)

    def test_non_positive_quote(self, engine: ConsensusEngine) -> None:
        """Any non-positive quote should reject the whole batch."""
        with pytest.raises(InvalidArgumentError, match="Invalid price"):
            engine.reconcile([100, 0, 200], ["a", "b", "c"], now=1)
        assert engine.ledger.is_empty


class TestSubmitSingle:
    """Test ConsensusEngine.submit_single()."""

    def test_commit(self, engine: ConsensusEngine) -> None:
        """Valid quote should be committed as-is."""
        observation = engine.submit_single(123, "Feed", now=9)
        assert observation.value == 123
        assert observation.source == "Feed"

    def test_rejects_zero(self, engine: ConsensusEngine) -> None:
        """Zero should be rejected."""
        with pytest.raises(InvalidArgumentError, match="Invalid price"):
            engine.submit_single(0, "Feed", now=1)

    def test_rejects_non_integer(self, engine: ConsensusEngine) -> None:
        """Prices must already be fixed-point integers."""
        with pytest.raises(InvalidArgumentError, match="Invalid price"):
            engine.submit_single(1.5, "Feed", now=1)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="Invalid price"):
            engine.submit_single(True, "Feed", now=1)

    def test_rejects_empty_source(self, engine: ConsensusEngine) -> None:
        """Empty source should be rejected."""
        with pytest.raises(InvalidArgumentError, match="Source required"):
            engine.submit_single(1, "", now=1)
        assert engine.ledger.is_empty


class TestOverride:
    """Test ConsensusEngine.override()."""

    def test_fixed_label(self, engine: ConsensusEngine) -> None:
        """Override should use the fixed label."""
        observation = engine.override(350, now=1)
        assert observation.source == MANUAL_OVERRIDE_SOURCE == "Manual Override"

    def test_rejects_non_positive(self, engine: ConsensusEngine) -> None:
        """Override should reject non-positive prices like other paths."""
        with pytest.raises(InvalidArgumentError):
            engine.override(0, now=1)
        with pytest.raises(InvalidArgumentError):
            engine.override(-5, now=1)
