"""
Deterministic HD wallet derivation for the treasury and its child wallets.
"""

from .derivation import (
    COIN_TYPE,
    TREASURY_PATH,
    account_from_path,
    derivation_path,
    derive_account,
    treasury_account,
)

__all__ = [
    "COIN_TYPE",
    "TREASURY_PATH",
    "account_from_path",
    "derivation_path",
    "derive_account",
    "treasury_account",
]
