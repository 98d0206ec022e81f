"""
Reclaim: sweep ``reclaim_percent`` of every child wallet's balance back to
the treasury.

Empty wallets and amounts that round to zero are skipped. The first failed
transfer aborts the run; earlier reclaims are not rolled back.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from eth_account.signers.local import LocalAccount

from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.ledger.balances import BalanceOracle
from wallet_keeper.ledger.models import TransactionReceipt
from wallet_keeper.ledger.transfers import TransferExecutor
from wallet_keeper.wallets.derivation import derive_account

logger = logging.getLogger(__name__)


def compute_reclaim_amount(balance: int, percent: Decimal | float | str) -> int:
    """round(balance * percent / 100), halves rounded up.

    With percent in (0, 100] the result lies in [0, balance].
    """
    # integer arithmetic: uint256 balances overflow the default Decimal precision
    num, den = Decimal(str(percent)).as_integer_ratio()
    return (2 * balance * num + 100 * den) // (200 * den)


def reclaim(
    config: KeeperConfig,
    treasury: LocalAccount,
    oracle: BalanceOracle,
    executor: TransferExecutor,
) -> list[TransactionReceipt]:
    receipts: list[TransactionReceipt] = []
    for index in range(config.wallet_count):
        wallet = derive_account(config.mnemonic, index)
        balance = oracle.get_balance(wallet.address, config.asset_id)
        logger.info("Wallet %d (%s) balance: %d (in base units)", index, wallet.address, balance)

        if balance == 0:
            logger.info("Wallet %d is empty, skipping", index)
            continue

        amount = compute_reclaim_amount(balance, config.reclaim_percent)
        if amount == 0:
            logger.info("Wallet %d reclaim amount rounds to 0 (dust), skipping", index)
            continue

        logger.info("Reclaiming %d from wallet %d to treasury %s", amount, index, treasury.address)
        receipts.append(executor.transfer(wallet, treasury.address, amount, config.asset_id))

    logger.info("Reclaim completed (%d transfers).", len(receipts))
    return receipts
