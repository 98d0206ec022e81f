"""
Error kinds raised by the wallet keeper.

Every failure in derivation, balance queries or transfers propagates as a
subclass of :class:`KeeperError`; nothing in the core retries.
"""
from __future__ import annotations

__all__ = [
    "KeeperError",
    "ConfigurationError",
    "InvalidSecret",
    "InvalidPath",
    "NetworkError",
    "UnknownAsset",
    "InsufficientFunds",
    "TransferRejected",
]


class KeeperError(Exception):
    """Base class for all wallet keeper failures."""


class ConfigurationError(KeeperError):
    """Invalid or conflicting configuration, detected before any network call."""


class InvalidSecret(KeeperError):
    """The mnemonic phrase cannot be used to derive accounts."""


class InvalidPath(KeeperError):
    """A wallet index cannot be encoded into a derivation path."""


class NetworkError(KeeperError):
    """The ledger endpoint could not be reached or timed out."""


class UnknownAsset(KeeperError):
    """The asset identifier is malformed or does not resolve to a token."""


class InsufficientFunds(KeeperError):
    def __init__(self, requested: int, available: int, address: str | None = None):
        self.requested = requested
        self.available = available
        self.address = address
        who = f" for {address}" if address else ""
        super().__init__(
            f"Insufficient funds{who}: attempted to send {requested}, but balance is {available}"
        )


class TransferRejected(KeeperError):
    """The ledger refused the transfer (RPC error, revert or receipt timeout)."""

    def __init__(self, message: str, tx_hash: str | None = None):
        self.tx_hash = tx_hash
        super().__init__(message)
