"""
Runtime configuration for the wallet keeper.

All environment-derived values are collected into one frozen
:class:`KeeperConfig` built at startup and passed down to the commands.

Environment
-----------
MNEMONIC                  BIP-39 phrase controlling treasury and children (required)
RPC_URL / PROVIDER        JSON-RPC endpoint (required)
ASSET_ID / ETH_ASSET_ID   asset address; the zero address selects the native coin (required)
WALLET_COUNT              number of child wallets (default 10)
FUNDING_THRESHOLD         minimum child balance in base units (default 5000000)
RECLAIM_PERCENT           share of each child balance swept back (default 99.9)
POLL_INTERVAL             seconds between continual funding passes (default 20)
CHAIN_ID                  expected chain id, checked on connect (optional)
RECEIPT_TIMEOUT           seconds to wait for each transfer receipt (default 120)
TREASURY_PATH             HD path of the treasury (default m/44'/60'/0'/0/0, the same account as child 0)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from dotenv import find_dotenv, load_dotenv
from eth_utils import is_hex_address, to_checksum_address

from wallet_keeper.errors import ConfigurationError
from wallet_keeper.wallets.derivation import TREASURY_PATH

NATIVE_ASSET = "0x0000000000000000000000000000000000000000"

DEFAULT_WALLET_COUNT = 10
# 0.005 of an asset with 9 decimals
DEFAULT_FUNDING_THRESHOLD = 5_000_000
DEFAULT_RECLAIM_PERCENT = Decimal("99.9")
DEFAULT_POLL_INTERVAL = 20.0
DEFAULT_RECEIPT_TIMEOUT = 120


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _parse_int(name: str, raw: Any) -> int:
    try:
        return int(str(raw).replace("_", ""))
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid {name}: {raw!r} is not an integer")


def _parse_decimal(name: str, raw: Any) -> Decimal:
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid {name}: {raw!r} is not a number")
    if not value.is_finite():
        raise ConfigurationError(f"Invalid {name}: {raw!r} is not a finite number")
    return value


def normalize_asset_id(asset_id: str) -> str:
    """Return the checksummed asset address or raise ConfigurationError."""
    if not isinstance(asset_id, str) or not is_hex_address(asset_id.strip()):
        raise ConfigurationError(f"Invalid ASSET_ID format: {asset_id}")
    return to_checksum_address(asset_id.strip())


def is_native_asset(asset_id: str) -> bool:
    return int(asset_id, 16) == 0


@dataclass(frozen=True)
class KeeperConfig:
    mnemonic: str
    rpc_url: str
    asset_id: str
    wallet_count: int = DEFAULT_WALLET_COUNT
    funding_threshold: int = DEFAULT_FUNDING_THRESHOLD
    reclaim_percent: Decimal = DEFAULT_RECLAIM_PERCENT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    chain_id: int | None = None
    receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT
    treasury_path: str = TREASURY_PATH

    def __post_init__(self) -> None:
        if not self.mnemonic or not self.mnemonic.strip():
            raise ConfigurationError("MNEMONIC is required")
        if not self.rpc_url:
            raise ConfigurationError("RPC_URL (or PROVIDER) is required")
        object.__setattr__(self, "mnemonic", " ".join(self.mnemonic.split()))
        object.__setattr__(self, "asset_id", normalize_asset_id(self.asset_id))
        object.__setattr__(self, "reclaim_percent", _parse_decimal("RECLAIM_PERCENT", self.reclaim_percent))
        if self.wallet_count <= 0:
            raise ConfigurationError(f"WALLET_COUNT must be greater than 0, got {self.wallet_count}")
        if self.funding_threshold <= 0:
            raise ConfigurationError(f"FUNDING_THRESHOLD must be greater than 0, got {self.funding_threshold}")
        if not (0 < self.reclaim_percent <= 100):
            raise ConfigurationError(f"RECLAIM_PERCENT must be in (0, 100], got {self.reclaim_percent}")
        if self.poll_interval < 0:
            raise ConfigurationError(f"POLL_INTERVAL must not be negative, got {self.poll_interval}")
        if self.receipt_timeout <= 0:
            raise ConfigurationError(f"RECEIPT_TIMEOUT must be greater than 0, got {self.receipt_timeout}")

    @property
    def native_asset(self) -> bool:
        return is_native_asset(self.asset_id)

    @classmethod
    def from_env(cls, env_file: str | None = None, **overrides: Any) -> "KeeperConfig":
        """Build the configuration from the process environment.

        ``env_file`` (or a .env found from the working directory) is loaded
        with python-dotenv first; values already in the environment win.
        Keyword overrides that are not None replace the environment values,
        which is how CLI flags are applied.
        """
        if env_file:
            if not os.path.exists(env_file):
                raise ConfigurationError(f"Env file not found: {env_file}")
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        mnemonic = _first_env("MNEMONIC")
        rpc_url = _first_env("RPC_URL", "PROVIDER")
        asset_id = _first_env("ASSET_ID", "ETH_ASSET_ID")
        if not mnemonic:
            raise ConfigurationError("Set MNEMONIC in env (use --env-file if needed)")
        if not (rpc_url or overrides.get("rpc_url")):
            raise ConfigurationError("Set --rpc-url or RPC_URL/PROVIDER in env")
        if not (asset_id or overrides.get("asset_id")):
            raise ConfigurationError("Set --asset-id or ASSET_ID/ETH_ASSET_ID in env")

        values: dict[str, Any] = {
            "mnemonic": mnemonic,
            "rpc_url": rpc_url,
            "asset_id": asset_id,
            "wallet_count": _parse_int("WALLET_COUNT", _first_env("WALLET_COUNT") or DEFAULT_WALLET_COUNT),
            "funding_threshold": _parse_int(
                "FUNDING_THRESHOLD", _first_env("FUNDING_THRESHOLD") or DEFAULT_FUNDING_THRESHOLD
            ),
            "reclaim_percent": _parse_decimal(
                "RECLAIM_PERCENT", _first_env("RECLAIM_PERCENT") or DEFAULT_RECLAIM_PERCENT
            ),
            "poll_interval": float(
                _parse_decimal("POLL_INTERVAL", _first_env("POLL_INTERVAL") or DEFAULT_POLL_INTERVAL)
            ),
            "receipt_timeout": _parse_int(
                "RECEIPT_TIMEOUT", _first_env("RECEIPT_TIMEOUT") or DEFAULT_RECEIPT_TIMEOUT
            ),
        }
        chain_id = _first_env("CHAIN_ID")
        values["chain_id"] = _parse_int("CHAIN_ID", chain_id) if chain_id else None
        values["treasury_path"] = _first_env("TREASURY_PATH") or TREASURY_PATH

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

