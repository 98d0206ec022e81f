from __future__ import annotations

import logging

from eth_account.signers.local import LocalAccount

from wallet_keeper.config.logging_config import TRANSFER_LOGGER_NAME, log_transfer
from wallet_keeper.errors import InsufficientFunds, KeeperError, TransferRejected
from wallet_keeper.ledger.balances import BalanceOracle
from wallet_keeper.ledger.models import TransactionReceipt, TransferIntent

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(TRANSFER_LOGGER_NAME)


class TransferExecutor:
    """Guarded transfers: the sender's balance is checked before anything is submitted.

    The check is advisory. Another spender can drain the account between the
    read and the submission, in which case the ledger's rejection is raised
    as TransferRejected.
    """

    def __init__(self, client, oracle: BalanceOracle | None = None):
        self.client = client
        self.oracle = oracle or BalanceOracle(client)

    def transfer(
        self,
        from_account: LocalAccount,
        to_address: str,
        amount: int,
        asset_id: str,
    ) -> TransactionReceipt:
        intent = TransferIntent(
            from_address=from_account.address,
            to_address=to_address,
            amount=int(amount),
            asset_id=asset_id,
        )
        if intent.amount <= 0:
            raise TransferRejected(f"Refusing to transfer non-positive amount {intent.amount}")

        balance = self.oracle.get_balance(intent.from_address, intent.asset_id)
        logger.info("Balance of AssetId %s for %s: %d", intent.asset_id, intent.from_address, balance)

        if balance < intent.amount:
            raise InsufficientFunds(intent.amount, balance, address=intent.from_address)

        try:
            receipt = self.client.submit_transfer(from_account, intent.to_address, intent.amount, intent.asset_id)
        except KeeperError as exc:
            log_transfer(
                audit_logger,
                intent.from_address,
                intent.to_address,
                intent.amount,
                intent.asset_id,
                tx_hash=getattr(exc, "tx_hash", None),
                success=False,
                reason=str(exc),
            )
            raise

        log_transfer(
            audit_logger,
            intent.from_address,
            intent.to_address,
            intent.amount,
            intent.asset_id,
            tx_hash=receipt.tx_hash,
        )
        logger.info("Sent transaction: %s", receipt.tx_hash)
        return receipt
