"""
Continual funding: poll every child wallet and top up any whose balance has
dropped below ``funding_threshold``.

Runs until the process is killed. A failed top-up is not skipped: the error
propagates and ends the loop, since funding problems need an operator.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable

from eth_account.signers.local import LocalAccount

from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.ledger.balances import BalanceOracle
from wallet_keeper.ledger.models import TransactionReceipt
from wallet_keeper.ledger.transfers import TransferExecutor
from wallet_keeper.wallets.derivation import derive_account

logger = logging.getLogger(__name__)


def funding_pass(
    config: KeeperConfig,
    treasury: LocalAccount,
    oracle: BalanceOracle,
    executor: TransferExecutor,
) -> list[TransactionReceipt]:
    """One sequential sweep over all child indices."""
    receipts: list[TransactionReceipt] = []
    for index in range(config.wallet_count):
        wallet = derive_account(config.mnemonic, index)
        balance = oracle.get_balance(wallet.address, config.asset_id)
        logger.info("Wallet %d balance: %d (in base units)", index, balance)

        # equality counts as funded
        if balance < config.funding_threshold:
            logger.info("Wallet %d balance is less than threshold, sending funds...", index)
            receipts.append(
                executor.transfer(treasury, wallet.address, config.funding_threshold, config.asset_id)
            )
    return receipts


def continual_funding(
    config: KeeperConfig,
    treasury: LocalAccount,
    oracle: BalanceOracle,
    executor: TransferExecutor,
    *,
    sleep: Callable[[float], None] = time.sleep,
    max_passes: int | None = None,
) -> int:
    """Run funding passes forever, sleeping ``config.poll_interval`` between them.

    ``max_passes`` bounds the loop (None means no bound). Returns the number
    of passes completed.
    """
    passes = 0
    while max_passes is None or passes < max_passes:
        receipts = funding_pass(config, treasury, oracle, executor)
        passes += 1
        logger.debug("Pass %d funded %d wallet(s)", passes, len(receipts))

        if max_passes is not None and passes >= max_passes:
            break
        logger.info("Waiting for %g seconds before next check...", config.poll_interval)
        sleep(config.poll_interval)
    return passes
