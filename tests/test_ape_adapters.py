from unittest.mock import MagicMock

import pytest

from swap_deployment import ape_adapters
from swap_deployment.ape_adapters import ApeArtifactProvider, ApeChainClient, _contract_container
from tests.conftest import CHAIN_ID, DEPLOYER, address


def test_contract_container_from_artifact(swap_artifact):
    container = _contract_container(swap_artifact)
    contract_type = container.contract_type
    assert contract_type.name == "SAEDSwap"
    assert contract_type.deployment_bytecode.bytecode == swap_artifact.bytecode
    assert [i.name for i in contract_type.constructor.inputs] == ["_saed", "_susd", "_usdt"]


def test_ape_artifact_provider(monkeypatch, token_artifacts):
    container = _contract_container(token_artifacts[0])
    monkeypatch.setattr(ape_adapters, "get_contract_container", lambda name: container)

    artifact = ApeArtifactProvider().get("SAED")
    assert artifact.name == "SAED"
    assert artifact.bytecode == token_artifacts[0].bytecode
    assert [i["name"] for i in artifact.constructor_inputs] == ["owner"]


def test_ape_chain_client(token_artifacts):
    account = MagicMock()
    account.address = DEPLOYER.lower()
    instance = account.deploy.return_value
    instance.address = address(0xBEEF)
    instance.receipt.txn_hash = "0x" + "cd" * 32
    instance.receipt.block_number = 3
    instance.receipt.chain_id = CHAIN_ID
    instance.receipt.transaction.sender = DEPLOYER

    client = ApeChainClient(account=account)
    assert client.address == DEPLOYER

    receipt = client.submit(token_artifacts[0], (DEPLOYER,))
    (container, *args), kwargs = account.deploy.call_args
    assert container.contract_type.name == "SAED"
    assert args == [DEPLOYER]
    assert kwargs == {"publish": False}
    assert receipt.address == address(0xBEEF)
    assert receipt.tx_hash == "0x" + "cd" * 32
    assert receipt.block_number == 3


def test_failed_ape_deployment_propagates(token_artifacts):
    account = MagicMock()
    account.deploy.side_effect = RuntimeError("Transaction failed")
    with pytest.raises(RuntimeError, match="Transaction failed"):
        ApeChainClient(account=account).submit(token_artifacts[0], (DEPLOYER,))
