"""
Configuration package for the wallet keeper.
"""

from wallet_keeper.config.settings import (
    NATIVE_ASSET,
    DEFAULT_WALLET_COUNT,
    DEFAULT_FUNDING_THRESHOLD,
    DEFAULT_RECLAIM_PERCENT,
    DEFAULT_POLL_INTERVAL,
    KeeperConfig,
    is_native_asset,
    normalize_asset_id,
)

from wallet_keeper.config.logging_config import (
    setup_logger,
    setup_transfer_logger,
    log_transfer,
)

from wallet_keeper.config.abis import ERC20_ABI

__all__ = [
    # Settings
    'NATIVE_ASSET',
    'DEFAULT_WALLET_COUNT',
    'DEFAULT_FUNDING_THRESHOLD',
    'DEFAULT_RECLAIM_PERCENT',
    'DEFAULT_POLL_INTERVAL',
    'KeeperConfig',
    'is_native_asset',
    'normalize_asset_id',

    # Logging
    'setup_logger',
    'setup_transfer_logger',
    'log_transfer',

    # ABIs
    'ERC20_ABI',
]
