"""
Ledger client - the keeper's only gateway to the chain.

Public API
----------
LedgerClient.connect(endpoint, chain_id=None, receipt_timeout=120)
    Build a Web3 HTTP connection and verify it answers (and, optionally,
    that it serves the expected chain).
LedgerClient.get_asset_balance(address, asset_id)
    Native balance for the zero asset address, ERC-20 ``balanceOf`` otherwise.
LedgerClient.submit_transfer(account, to_address, amount, asset_id)
    Sign, broadcast and wait for the receipt of a single transfer.

Failures surface as NetworkError, UnknownAsset or TransferRejected.
"""
from __future__ import annotations

import logging

import requests
from eth_account.signers.local import LocalAccount
from eth_utils import is_hex_address, to_checksum_address
from web3 import Web3
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    TimeExhausted,
    Web3RPCError,
)
from web3.middleware import ExtraDataToPOAMiddleware

from wallet_keeper.config.abis import ERC20_ABI
from wallet_keeper.config.settings import DEFAULT_RECEIPT_TIMEOUT, is_native_asset
from wallet_keeper.errors import ConfigurationError, NetworkError, TransferRejected, UnknownAsset
from wallet_keeper.ledger.models import TransactionReceipt

__all__ = ["LedgerClient"]

logger = logging.getLogger(__name__)

_NETWORK_ERRORS = (requests.exceptions.RequestException, ConnectionError)
_QUERY_ERRORS = (*_NETWORK_ERRORS, Web3RPCError)
_REJECTION_ERRORS = (Web3RPCError, ContractLogicError, ValueError)


class LedgerClient:
    def __init__(self, w3: Web3, *, receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT):
        self.w3 = w3
        self.receipt_timeout = receipt_timeout

    @classmethod
    def connect(
        cls,
        endpoint: str,
        chain_id: int | None = None,
        *,
        receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT,
        request_timeout: int = 30,
    ) -> "LedgerClient":
        w3 = Web3(Web3.HTTPProvider(endpoint, request_kwargs={"timeout": request_timeout}))
        # Gnosis and other POA chains carry oversized extraData
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        try:
            connected = w3.is_connected()
            actual_chain_id = w3.eth.chain_id if connected else None
        except _QUERY_ERRORS as exc:
            raise NetworkError(f"Cannot reach ledger at {endpoint}: {exc}") from exc
        if not connected:
            raise NetworkError(f"Web3 provider not connected (check RPC URL {endpoint})")
        if chain_id is not None and actual_chain_id != chain_id:
            raise ConfigurationError(f"Unexpected chainId {actual_chain_id}; expected {chain_id}")

        logger.info("Connected to %s (chainId %s)", endpoint, actual_chain_id)
        return cls(w3, receipt_timeout=receipt_timeout)

    def _token(self, asset_id: str):
        return self.w3.eth.contract(address=to_checksum_address(asset_id), abi=ERC20_ABI)

    def get_asset_balance(self, address: str, asset_id: str) -> int:
        if not isinstance(asset_id, str) or not is_hex_address(asset_id):
            raise UnknownAsset(f"Malformed asset id: {asset_id!r}")
        owner = to_checksum_address(address)
        try:
            if is_native_asset(asset_id):
                return int(self.w3.eth.get_balance(owner))
            return int(self._token(asset_id).functions.balanceOf(owner).call())
        except (BadFunctionCallOutput, ContractLogicError) as exc:
            raise UnknownAsset(f"Asset {asset_id} did not answer balanceOf: {exc}") from exc
        except _QUERY_ERRORS as exc:
            raise NetworkError(f"Balance query for {owner} failed: {exc}") from exc

    def _fee_fields(self) -> dict[str, int]:
        latest_block = self.w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas")
        if base_fee is None:
            return {"gasPrice": int(self.w3.eth.gas_price)}
        priority_fee = int(self.w3.eth.max_priority_fee)
        return {
            "maxPriorityFeePerGas": priority_fee,
            "maxFeePerGas": int(base_fee) * 2 + priority_fee,
        }

    def _build_transfer(self, sender: str, to_address: str, amount: int, asset_id: str) -> dict:
        tx = {
            "from": sender,
            "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
            "chainId": self.w3.eth.chain_id,
            **self._fee_fields(),
        }
        if is_native_asset(asset_id):
            tx.update({"to": to_address, "value": amount})
            tx["gas"] = self.w3.eth.estimate_gas(tx)
            return tx
        # build_transaction estimates gas itself
        return self._token(asset_id).functions.transfer(to_address, amount).build_transaction(tx)

    def submit_transfer(
        self,
        account: LocalAccount,
        to_address: str,
        amount: int,
        asset_id: str,
    ) -> TransactionReceipt:
        """Submit one transfer with the default fee policy and wait for its receipt.

        Each call waits for inclusion before returning, so consecutive
        transfers from the same account never race for a nonce.
        """
        if not isinstance(asset_id, str) or not is_hex_address(asset_id):
            raise UnknownAsset(f"Malformed asset id: {asset_id!r}")
        sender = to_checksum_address(account.address)
        recipient = to_checksum_address(to_address)
        tx_hash: str | None = None
        try:
            tx = self._build_transfer(sender, recipient, int(amount), asset_id)
            signed = account.sign_transaction(tx)
            tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(signed.raw_transaction))
            logger.debug("Broadcast %s from %s", tx_hash, sender)
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except TimeExhausted as exc:
            raise TransferRejected(
                f"No receipt for {tx_hash} within {self.receipt_timeout}s: {exc}", tx_hash=tx_hash
            ) from exc
        except _NETWORK_ERRORS as exc:
            raise NetworkError(f"Transfer from {sender} failed to reach the ledger: {exc}") from exc
        except _REJECTION_ERRORS as exc:
            raise TransferRejected(f"Ledger rejected transfer from {sender}: {exc}", tx_hash=tx_hash) from exc

        status = int(receipt.get("status", 0))
        if status != 1:
            raise TransferRejected(f"Transaction {tx_hash} reverted (status {status})", tx_hash=tx_hash)
        return TransactionReceipt(
            tx_hash=tx_hash,
            status=status,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )
