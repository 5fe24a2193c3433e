"""Error taxonomy for the oracle engine.

Every failure raised by the engine is synchronous and leaves the ledger
untouched. Callers decide whether to retry.
"""


class OracleError(Exception):
    """Base exception for oracle errors."""

    pass


class UnauthorizedError(OracleError):
    """Raised when the caller does not hold the required role.

    :ivar caller: Identity that attempted the call.
    :ivar role: Role that was required ("owner" or "data provider").
    """

    def __init__(self, caller: str, role: str):
        """Initialize the error.

        :param caller: Identity that attempted the call.
        :param role: Role that was required.
        """
        self.caller = caller
        self.role = role
        super().__init__(f"Only {role}: {caller!r} is not authorized")


class InvalidArgumentError(OracleError, ValueError):
    """Raised on a non-positive price, empty source, bad batch or null provider."""

    pass


class StalePriceError(OracleError):
    """Raised by the guaranteed-fresh read when the latest price is too old.

    :ivar age: Seconds elapsed since the latest observation.
    :ivar threshold: Maximum accepted age in seconds.
    """

    def __init__(self, age: int, threshold: int):
        """Initialize the error.

        :param age: Seconds since the latest observation.
        :param threshold: Freshness threshold in seconds.
        """
        self.age = age
        self.threshold = threshold
        super().__init__(f"Price data is stale ({age}s old, threshold {threshold}s)")


class NoDataError(OracleError):
    """Raised when no observation has been committed yet."""

    pass
