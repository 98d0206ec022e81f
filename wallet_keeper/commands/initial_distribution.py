"""
Initial distribution: push ``funding_threshold`` from the treasury to every
child wallet, in ascending index order.

The first failed transfer aborts the run. Transfers already sent stay sent.
"""
from __future__ import annotations

import logging

from eth_account.signers.local import LocalAccount

from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.ledger.models import TransactionReceipt
from wallet_keeper.ledger.transfers import TransferExecutor
from wallet_keeper.wallets.derivation import derive_account

logger = logging.getLogger(__name__)


def initial_distribution(
    config: KeeperConfig,
    treasury: LocalAccount,
    executor: TransferExecutor,
) -> list[TransactionReceipt]:
    receipts: list[TransactionReceipt] = []
    for index in range(config.wallet_count):
        wallet = derive_account(config.mnemonic, index)
        logger.info("Wallet %d address: %s", index, wallet.address)
        receipts.append(
            executor.transfer(treasury, wallet.address, config.funding_threshold, config.asset_id)
        )

    logger.info("Initial distribution completed (%d transfers).", len(receipts))
    return receipts
