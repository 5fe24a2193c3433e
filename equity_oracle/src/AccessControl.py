"""AccessControl: Owner and data-provider role checks.

Identities are Ethereum-style addresses. They are normalized to checksum
form on the way in so that ``0xabc...`` and ``0xABC...`` compare equal.

.. code-block:: python

    >>> acl = AccessControl("0x70997970C51812dc3A010C7d01b50e0d17dc79C8")
    >>> acl.data_provider == acl.owner
    True
"""

from __future__ import annotations

import logging

from web3 import Web3

from .errors import InvalidArgumentError, UnauthorizedError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_address(address: str | None) -> str | None:
    """Return the checksum form of an address, or None if it is not one.

    :param address: Candidate address string.
    :returns: Checksummed address, or None for empty/malformed input.
    """
    if not address or not Web3.is_address(address):
        return None
    return Web3.to_checksum_address(address)


class AccessControl:
    """Two-role guard: a fixed owner and a reassignable data provider.

    The owner always retains provider rights.

    :ivar owner: Checksummed owner address.
    :ivar data_provider: Checksummed data provider address.
    """

    def __init__(self, owner: str) -> None:
        """Initialize the guard.

        :param owner: Owner address. Also becomes the initial data provider.
        :raises InvalidArgumentError: If owner is not a usable address.
        """
        normalized = normalize_address(owner)
        if normalized is None or normalized == ZERO_ADDRESS:
            raise InvalidArgumentError(f"Invalid owner: {owner!r}")
        self.owner: str = normalized
        self.data_provider: str = normalized

    def is_owner(self, caller: str | None) -> bool:
        """Check whether caller is the owner."""
        return normalize_address(caller) == self.owner

    def is_provider(self, caller: str | None) -> bool:
        """Check whether caller may submit prices (provider or owner)."""
        normalized = normalize_address(caller)
        return normalized is not None and normalized in (self.data_provider, self.owner)

    def require_owner(self, caller: str | None) -> None:
        """Reject callers other than the owner.

        :param caller: Identity of the caller.
        :raises UnauthorizedError: If caller is not the owner.
        """
        if not self.is_owner(caller):
            logger.warning(f"Rejected owner-only call from {caller}")
            raise UnauthorizedError(str(caller), "owner")

    def require_provider(self, caller: str | None) -> None:
        """Reject callers that are neither the data provider nor the owner.

        :param caller: Identity of the caller.
        :raises UnauthorizedError: If caller lacks provider rights.
        """
        if not self.is_provider(caller):
            logger.warning(f"Rejected provider-only call from {caller}")
            raise UnauthorizedError(str(caller), "data provider")

    def set_data_provider(self, caller: str | None, new_provider: str | None) -> str:
        """Reassign the data provider role.

        :param caller: Identity of the caller (must be the owner).
        :param new_provider: Address of the new data provider.
        :returns: Checksummed address of the new data provider.
        :raises UnauthorizedError: If caller is not the owner.
        :raises InvalidArgumentError: If new_provider is null, zero or malformed.
        """
        self.require_owner(caller)

        normalized = normalize_address(new_provider)
        if normalized is None or normalized == ZERO_ADDRESS:
            raise InvalidArgumentError(f"Invalid provider: {new_provider!r}")

        previous = self.data_provider
        self.data_provider = normalized
        logger.info(f"Data provider changed: {previous} -> {normalized}")
        return normalized
