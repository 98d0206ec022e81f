"""
Read-only report of the treasury and every child wallet: address,
derivation path, balance and whether it sits below the funding threshold.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from eth_account.signers.local import LocalAccount

from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.ledger.balances import BalanceOracle
from wallet_keeper.wallets.derivation import derivation_path, derive_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletStatus:
    index: int
    address: str
    path: str
    balance: int
    below_threshold: bool


def wallet_status(
    config: KeeperConfig,
    treasury: LocalAccount,
    oracle: BalanceOracle,
) -> list[WalletStatus]:
    treasury_balance = oracle.get_balance(treasury.address, config.asset_id)
    logger.info("Treasury %s balance: %d", treasury.address, treasury_balance)

    report: list[WalletStatus] = []
    for index in range(config.wallet_count):
        wallet = derive_account(config.mnemonic, index)
        balance = oracle.get_balance(wallet.address, config.asset_id)
        row = WalletStatus(
            index=index,
            address=wallet.address,
            path=derivation_path(index),
            balance=balance,
            below_threshold=balance < config.funding_threshold,
        )
        logger.info(
            "  [%d] %s @ %s balance=%d%s",
            row.index,
            row.address,
            row.path,
            row.balance,
            " (below threshold)" if row.below_threshold else "",
        )
        report.append(row)

    # Initial distribution needs this much in the treasury
    required = config.funding_threshold * config.wallet_count
    if treasury_balance < required:
        logger.warning(
            "Treasury holds %d, less than the %d an initial distribution would send",
            treasury_balance,
            required,
        )
    return report
