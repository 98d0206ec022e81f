from __future__ import annotations

import logging

from eth_utils import is_hex_address

from wallet_keeper.errors import UnknownAsset

logger = logging.getLogger(__name__)


class BalanceOracle:
    """Reads an account's balance of one asset through the ledger client.

    Every call goes to the ledger; freshness is governed by how often the
    caller polls.
    """

    def __init__(self, client):
        self.client = client

    def get_balance(self, address: str, asset_id: str) -> int:
        if not isinstance(asset_id, str) or not is_hex_address(asset_id):
            raise UnknownAsset(f"Malformed asset id: {asset_id!r}")
        balance = int(self.client.get_asset_balance(address, asset_id))
        logger.debug("Balance of %s for %s: %d", asset_id, address, balance)
        return balance
