#!/usr/bin/env python3
from __future__ import annotations

import re

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError

from wallet_keeper.errors import InvalidPath, InvalidSecret

# BIP-44 coin type for Ethereum-compatible chains
COIN_TYPE = 60
HARDENED_LIMIT = 2**31

TREASURY_PATH = f"m/44'/{COIN_TYPE}'/0'/0/0"

_PATH_RE = re.compile(r"m(/[0-9]+'?)*")


def derivation_path(index: int) -> str:
    """Return the HD path for child ``index``: m/44'/60'/<index>'/0/0."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidPath(f"Wallet index must be an integer, got {index!r}")
    if not 0 <= index < HARDENED_LIMIT:
        raise InvalidPath(f"Wallet index {index} outside hardened range [0, {HARDENED_LIMIT})")
    return f"m/44'/{COIN_TYPE}'/{index}'/0/0"


def validate_path(path: str) -> None:
    if not isinstance(path, str) or not _PATH_RE.fullmatch(path):
        raise InvalidPath(f"Malformed derivation path: {path!r}")
    for level in path.split("/")[1:]:
        if int(level.rstrip("'")) >= HARDENED_LIMIT:
            raise InvalidPath(f"Derivation path level {level} out of range in {path}")


def account_from_path(mnemonic: str, path: str) -> LocalAccount:
    """Derive a spendable account from a BIP-39 mnemonic and a BIP-32 path."""
    validate_path(path)
    # eth-account marks HD wallet features as unaudited
    Account.enable_unaudited_hdwallet_features()
    try:
        return Account.from_mnemonic(mnemonic, account_path=path)
    except (ValidationError, ValueError) as exc:
        raise InvalidSecret(f"Cannot derive account at {path}: {exc}") from exc


def treasury_account(mnemonic: str, path: str = TREASURY_PATH) -> LocalAccount:
    return account_from_path(mnemonic, path)


def derive_account(mnemonic: str, index: int) -> LocalAccount:
    """Derive child wallet ``index``.

    Pure function of its inputs: the same mnemonic and index always give the
    same account. Nothing is cached.
    """
    return account_from_path(mnemonic, derivation_path(index))
