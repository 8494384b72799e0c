from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes

from swap_deployment.chain import TransactionReverted, Web3ChainClient
from tests.conftest import CHAIN_ID, DEPLOYER, address

TX_HASH = HexBytes("0x" + "ab" * 32)


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.chain_id = CHAIN_ID
    w3.eth.contract.return_value.constructor.return_value.transact.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "contractAddress": address(0xBEEF).lower(),
        "transactionHash": TX_HASH,
        "blockNumber": 12,
    }
    return w3


def test_submit(w3, swap_artifact):
    client = Web3ChainClient(w3=w3, sender=DEPLOYER.lower(), timeout=30)
    assert client.address == DEPLOYER

    args = (address(1), address(2), address(3))
    receipt = client.submit(swap_artifact, args)

    w3.eth.contract.assert_called_once_with(abi=swap_artifact.abi, bytecode=swap_artifact.bytecode)
    factory = w3.eth.contract.return_value
    factory.constructor.assert_called_once_with(*args)
    factory.constructor.return_value.transact.assert_called_once_with({"from": DEPLOYER})
    w3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH, timeout=30)

    assert receipt.address == address(0xBEEF)
    assert receipt.tx_hash == "0x" + "ab" * 32
    assert receipt.block_number == 12
    assert receipt.chain_id == CHAIN_ID
    assert receipt.deployer == DEPLOYER


def test_reverted_deployment(w3, swap_artifact):
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 0,
        "contractAddress": None,
        "transactionHash": TX_HASH,
        "blockNumber": 12,
    }
    client = Web3ChainClient(w3=w3, sender=DEPLOYER)
    with pytest.raises(TransactionReverted, match="SAEDSwap reverted") as exc_info:
        client.submit(swap_artifact, ())
    assert exc_info.value.tx_hash == "0x" + "ab" * 32


def test_timeout_propagates(w3, token_artifacts):
    w3.eth.wait_for_transaction_receipt.side_effect = TimeoutError("not mined")
    client = Web3ChainClient(w3=w3, sender=DEPLOYER)
    with pytest.raises(TimeoutError):
        client.submit(token_artifacts[0], (DEPLOYER,))
