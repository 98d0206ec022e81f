"""
LedgerClient against a mocked Web3 instance.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, PropertyMock

import pytest
import requests
from hexbytes import HexBytes
from web3.exceptions import BadFunctionCallOutput, TimeExhausted, Web3RPCError

from wallet_keeper.config.settings import NATIVE_ASSET
from wallet_keeper.errors import ConfigurationError, NetworkError, TransferRejected, UnknownAsset
from wallet_keeper.ledger import client as client_module
from wallet_keeper.ledger import LedgerClient
from wallet_keeper.wallets import derive_account

from .conftest import MNEMONIC, TOKEN, child_address

TX_HASH = HexBytes(b"\x12" * 32)


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.chain_id = 100
    w3.eth.get_transaction_count.return_value = 5
    w3.eth.get_block.return_value = {"baseFeePerGas": 10}
    w3.eth.max_priority_fee = 2
    w3.eth.estimate_gas.return_value = 21000
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "blockNumber": 9, "gasUsed": 21000}
    return w3


@pytest.fixture
def mock_account():
    account = MagicMock()
    account.address = child_address(0)
    account.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"signed")
    return account


def test_native_balance(w3):
    w3.eth.get_balance.return_value = 123
    assert LedgerClient(w3).get_asset_balance(child_address(0), NATIVE_ASSET) == 123
    w3.eth.contract.assert_not_called()


def test_token_balance(w3):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.return_value = 7
    assert LedgerClient(w3).get_asset_balance(child_address(0), TOKEN) == 7
    w3.eth.contract.return_value.functions.balanceOf.assert_called_once_with(child_address(0))


def test_token_without_code_is_unknown_asset(w3):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.side_effect = BadFunctionCallOutput(
        "Could not decode contract function call"
    )
    with pytest.raises(UnknownAsset):
        LedgerClient(w3).get_asset_balance(child_address(0), TOKEN)


def test_malformed_asset_is_unknown_asset(w3):
    with pytest.raises(UnknownAsset):
        LedgerClient(w3).get_asset_balance(child_address(0), "0xzz")


def test_connection_failure_is_network_error(w3):
    w3.eth.get_balance.side_effect = requests.exceptions.ConnectionError("connection refused")
    with pytest.raises(NetworkError, match="connection refused"):
        LedgerClient(w3).get_asset_balance(child_address(0), NATIVE_ASSET)


def test_rpc_error_on_balance_query_is_network_error(w3):
    w3.eth.get_balance.side_effect = Web3RPCError("limit exceeded")
    with pytest.raises(NetworkError, match="limit exceeded"):
        LedgerClient(w3).get_asset_balance(child_address(0), NATIVE_ASSET)


def test_rpc_error_on_token_balance_is_network_error(w3):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.side_effect = Web3RPCError(
        "header not found"
    )
    with pytest.raises(NetworkError):
        LedgerClient(w3).get_asset_balance(child_address(0), TOKEN)


def test_native_transfer_is_signed_and_awaited(w3):
    sender = derive_account(MNEMONIC, 0)

    receipt = LedgerClient(w3, receipt_timeout=30).submit_transfer(sender, child_address(1), 1000, NATIVE_ASSET)

    assert receipt.tx_hash == "0x" + "12" * 32
    assert receipt.status == 1
    assert receipt.block_number == 9
    tx = w3.eth.estimate_gas.call_args.args[0]
    assert tx["to"] == child_address(1)
    assert tx["value"] == 1000
    assert tx["nonce"] == 5
    assert tx["maxPriorityFeePerGas"] == 2
    assert tx["maxFeePerGas"] == 22
    w3.eth.get_transaction_count.assert_called_once_with(sender.address, "pending")
    w3.eth.wait_for_transaction_receipt.assert_called_once_with("0x" + "12" * 32, timeout=30)


def test_legacy_fee_when_no_base_fee(w3, mock_account):
    w3.eth.get_block.return_value = {}
    w3.eth.gas_price = 7

    LedgerClient(w3).submit_transfer(mock_account, child_address(1), 1, NATIVE_ASSET)

    tx = mock_account.sign_transaction.call_args.args[0]
    assert tx["gasPrice"] == 7
    assert "maxFeePerGas" not in tx


def test_token_transfer_calls_erc20_transfer(w3, mock_account):
    transfer_fn = w3.eth.contract.return_value.functions.transfer
    transfer_fn.return_value.build_transaction.return_value = {"to": TOKEN, "data": "0xa9059cbb", "gas": 60000}

    LedgerClient(w3).submit_transfer(mock_account, child_address(1), 250, TOKEN)

    transfer_fn.assert_called_once_with(child_address(1), 250)
    built_with = transfer_fn.return_value.build_transaction.call_args.args[0]
    assert built_with["from"] == child_address(0)
    assert built_with["nonce"] == 5
    mock_account.sign_transaction.assert_called_once_with({"to": TOKEN, "data": "0xa9059cbb", "gas": 60000})
    w3.eth.send_raw_transaction.assert_called_once_with(b"signed")


def test_reverted_receipt_is_rejected(w3, mock_account):
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}

    with pytest.raises(TransferRejected) as excinfo:
        LedgerClient(w3).submit_transfer(mock_account, child_address(1), 1, NATIVE_ASSET)

    assert excinfo.value.tx_hash == "0x" + "12" * 32


def test_rpc_rejection_is_surfaced_verbatim(w3, mock_account):
    w3.eth.send_raw_transaction.side_effect = Web3RPCError("insufficient funds for gas * price + value")

    with pytest.raises(TransferRejected, match="insufficient funds for gas"):
        LedgerClient(w3).submit_transfer(mock_account, child_address(1), 1, NATIVE_ASSET)


def test_receipt_timeout_is_rejected(w3, mock_account):
    w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not in chain after 120 seconds")

    with pytest.raises(TransferRejected, match="No receipt"):
        LedgerClient(w3).submit_transfer(mock_account, child_address(1), 1, NATIVE_ASSET)


def test_connect_checks_chain_id(monkeypatch):
    fake_w3 = MagicMock()
    fake_w3.is_connected.return_value = True
    fake_w3.eth.chain_id = 10
    monkeypatch.setattr(client_module, "Web3", MagicMock(return_value=fake_w3))

    with pytest.raises(ConfigurationError, match="expected 100"):
        LedgerClient.connect("http://localhost:8545", chain_id=100)

    assert LedgerClient.connect("http://localhost:8545", chain_id=10).w3 is fake_w3


def test_connect_reports_unreachable_endpoint(monkeypatch):
    fake_w3 = MagicMock()
    fake_w3.is_connected.return_value = False
    monkeypatch.setattr(client_module, "Web3", MagicMock(return_value=fake_w3))

    with pytest.raises(NetworkError):
        LedgerClient.connect("http://localhost:8545")


def test_connect_rpc_error_is_network_error(monkeypatch):
    fake_w3 = MagicMock()
    fake_w3.is_connected.return_value = True
    type(fake_w3.eth).chain_id = PropertyMock(side_effect=Web3RPCError("limit exceeded"))
    monkeypatch.setattr(client_module, "Web3", MagicMock(return_value=fake_w3))

    with pytest.raises(NetworkError, match="limit exceeded"):
        LedgerClient.connect("http://localhost:8545")
