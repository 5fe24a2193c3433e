"""Test doubles and well-known identities shared by the test modules."""

import asyncio

from equity_oracle.src.fetchers import BaseFetcher

OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
PROVIDER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
USER = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

START_TIME = 1_700_000_000


class FakeClock:
    """Manually advanced clock returning Unix seconds."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(BaseFetcher):
    """In-memory fetcher with a configurable price, delay or error."""

    name = "fake"
    label = "Fake Feed"

    def __init__(
        self,
        price: float | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ):
        super().__init__()
        self.price = price
        self.delay = delay
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, symbol: str) -> float | None:
        self.calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.price
