"""PriceLedger: Latest-price slot plus a bounded, append-only price history.

Every state change in the oracle goes through :meth:`PriceLedger.commit`.
The history is a ring buffer: when it is full, the oldest observation is
evicted and handed to the optional ``archive`` callback.

The timestamp index is last-write-wins. Two commits in the same second are
both kept in the ordered series, but ``get_at`` returns the newer one.

.. code-block:: python

    >>> ledger = PriceLedger(history_limit=2)
    >>> ledger.commit(100, "a", now=10).source
    'a'
    >>> ledger.get_at(10).value
    100
    >>> ledger.get_at(11).valid
    False
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Iterator

from .Freshness import is_fresh
from .PriceObservation import PriceObservation

logger = logging.getLogger(__name__)

UpdateListener = Callable[[PriceObservation], None]


class PriceLedger:
    """Store of committed price observations.

    :ivar history_limit: Maximum number of observations kept in memory.
    :ivar latest: Most recent observation, or the invalid sentinel when empty.
    """

    DEFAULT_HISTORY_LIMIT = 10_000

    def __init__(
        self,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        archive: UpdateListener | None = None,
    ) -> None:
        """Initialize an empty ledger.

        :param history_limit: Ring buffer capacity (must be at least 1).
        :param archive: Optional callback receiving evicted observations.
        :raises ValueError: If history_limit is less than 1.
        """
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")

        self.history_limit = history_limit
        self.latest: PriceObservation = PriceObservation.invalid()
        self._order: deque[PriceObservation] = deque()
        self._history: dict[int, PriceObservation] = {}
        self._archive = archive
        self._listeners: list[UpdateListener] = []
        self.total_commits = 0

    def __len__(self) -> int:
        """Return the number of observations currently retained."""
        return len(self._order)

    @property
    def is_empty(self) -> bool:
        """Check if nothing has been committed yet."""
        return not self.latest.valid

    def subscribe(self, listener: UpdateListener) -> None:
        """Register a callback invoked after every commit.

        :param listener: Callable receiving the new observation.
        """
        self._listeners.append(listener)

    def commit(self, value: int, source: str, now: int) -> PriceObservation:
        """Record a new observation and make it the latest.

        Callers are responsible for validation. The archive callback and the
        listeners run after the ledger state is updated; their failures are
        logged and do not undo the commit.

        :param value: Fixed-point price value.
        :param source: Source label.
        :param now: Commit time in whole seconds.
        :returns: The committed observation.
        """
        observation = PriceObservation(value=value, timestamp=now, source=source)

        evicted = None
        if len(self._order) >= self.history_limit:
            evicted = self._order.popleft()
            # Keep the index entry if a newer commit in the same second owns it
            if self._history.get(evicted.timestamp) is evicted:
                del self._history[evicted.timestamp]

        self._order.append(observation)
        self._history[now] = observation
        self.latest = observation
        self.total_commits += 1

        if evicted is not None:
            logger.debug(f"Evicted observation at {evicted.timestamp} from history")
            if self._archive is not None:
                self._dispatch(self._archive, evicted)

        for listener in self._listeners:
            self._dispatch(listener, observation)

        return observation

    def _dispatch(self, callback: UpdateListener, observation: PriceObservation) -> None:
        """Invoke a callback, logging instead of propagating its failure."""
        try:
            callback(observation)
        except Exception:
            logger.exception(
                f"Callback {callback!r} failed for observation at {observation.timestamp}"
            )

    def read(self, now: int, threshold: int) -> tuple[PriceObservation, bool]:
        """Return the latest observation and whether it is fresh.

        :param now: Current time in whole seconds.
        :param threshold: Maximum accepted age in seconds.
        :returns: Tuple of (latest observation, fresh flag).
        """
        fresh = self.latest.valid and is_fresh(now, self.latest.timestamp, threshold)
        return self.latest, fresh

    def get_at(self, timestamp: int) -> PriceObservation:
        """Look up the observation committed at an exact second.

        :param timestamp: Commit time to look up.
        :returns: The observation, or the invalid sentinel if none exists.
        """
        return self._history.get(timestamp, PriceObservation.invalid())

    def iter_newest_first(self) -> Iterator[PriceObservation]:
        """Iterate retained observations from newest to oldest."""
        return reversed(self._order)

    def timestamps(self) -> list[int]:
        """Return commit timestamps in commit order."""
        return [obs.timestamp for obs in self._order]

    @property
    def oldest(self) -> PriceObservation:
        """Oldest retained observation, or the invalid sentinel when empty."""
        return self._order[0] if self._order else PriceObservation.invalid()

    @property
    def has_evicted(self) -> bool:
        """Check if any observation has been dropped from memory."""
        return self.total_commits > len(self._order)
