"""
Ledger access: the web3-backed client, the balance oracle and the guarded
transfer executor.
"""

from .models import TransactionReceipt, TransferIntent
from .balances import BalanceOracle
from .transfers import TransferExecutor
from .client import LedgerClient

__all__ = [
    "BalanceOracle",
    "LedgerClient",
    "TransactionReceipt",
    "TransferExecutor",
    "TransferIntent",
]
