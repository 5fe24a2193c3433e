"""Freshness classification of the latest observation."""

# Maximum age in seconds before a guaranteed-fresh read is refused.
STALE_THRESHOLD = 3600


def observation_age(now: int, timestamp: int) -> int:
    """Return seconds elapsed since timestamp (never negative).

    A timestamp ahead of ``now`` counts as age zero.
    """
    return max(0, now - timestamp)


def is_fresh(now: int, timestamp: int, threshold: int = STALE_THRESHOLD) -> bool:
    """Check whether an observation taken at timestamp is still fresh.

    :param now: Current time in whole seconds.
    :param timestamp: Observation time in whole seconds.
    :param threshold: Maximum accepted age in seconds (inclusive).
    :returns: True if the age does not exceed the threshold.
    """
    return observation_age(now, timestamp) <= threshold
