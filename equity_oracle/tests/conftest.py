"""Shared fixtures for oracle tests."""

import random

import pytest

from equity_oracle.src.PriceOracle import PriceOracle
from equity_oracle.tests.fakes import OWNER, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def oracle(clock: FakeClock) -> PriceOracle:
    return PriceOracle(owner=OWNER, clock=clock, rng=random.Random(42))
