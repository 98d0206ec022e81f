"""
Shared fixtures: an in-memory ledger and a configuration built on the
well-known development mnemonic.
"""
from __future__ import annotations

import pytest

from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.errors import TransferRejected
from wallet_keeper.ledger import BalanceOracle, TransactionReceipt, TransferExecutor
from wallet_keeper.wallets import account_from_path, derive_account

MNEMONIC = "test test test test test test test test test test test junk"
TOKEN = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
# outside the child paths m/44'/60'/i'/0/0
TREASURY_PATH = "m/44'/60'/0'/0/1"


class FakeLedger:
    """Ledger client double: balances per (address, asset), transfers recorded in order."""

    def __init__(self, balances: dict[tuple[str, str], int] | None = None):
        self.balances: dict[tuple[str, str], int] = dict(balances or {})
        self.transfers: list[tuple[str, str, int, str]] = []
        self.balance_queries: list[tuple[str, str]] = []
        self.reject_after: int | None = None

    def set_balance(self, address: str, asset_id: str, amount: int) -> None:
        self.balances[(address, asset_id)] = amount

    def get_asset_balance(self, address: str, asset_id: str) -> int:
        self.balance_queries.append((address, asset_id))
        return self.balances.get((address, asset_id), 0)

    def submit_transfer(self, account, to_address, amount, asset_id) -> TransactionReceipt:
        if self.reject_after is not None and len(self.transfers) >= self.reject_after:
            raise TransferRejected("execution reverted", tx_hash="0xdead")
        key_from = (account.address, asset_id)
        key_to = (to_address, asset_id)
        self.balances[key_from] = self.balances.get(key_from, 0) - amount
        self.balances[key_to] = self.balances.get(key_to, 0) + amount
        self.transfers.append((account.address, to_address, amount, asset_id))
        return TransactionReceipt(tx_hash=f"0x{len(self.transfers):064x}", status=1, block_number=len(self.transfers))


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def oracle(ledger) -> BalanceOracle:
    return BalanceOracle(ledger)


@pytest.fixture
def executor(ledger, oracle) -> TransferExecutor:
    return TransferExecutor(ledger, oracle)


@pytest.fixture
def treasury():
    return account_from_path(MNEMONIC, TREASURY_PATH)


@pytest.fixture
def make_config():
    def _make(**overrides) -> KeeperConfig:
        values = {
            "mnemonic": MNEMONIC,
            "rpc_url": "http://localhost:8545",
            "asset_id": TOKEN,
            "wallet_count": 3,
            "funding_threshold": 5_000_000,
            "treasury_path": TREASURY_PATH,
        }
        values.update(overrides)
        return KeeperConfig(**values)

    return _make


def child_address(index: int) -> str:
    return derive_account(MNEMONIC, index).address
