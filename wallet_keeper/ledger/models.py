from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferIntent:
    """A transfer about to be validated and submitted; discarded afterwards."""

    from_address: str
    to_address: str
    amount: int
    asset_id: str


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    status: int
    block_number: int | None = None
    gas_used: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1
