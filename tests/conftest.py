import pytest
from eth_utils import to_checksum_address

from swap_deployment.artifacts import ArtifactProvider, ContractArtifact
from swap_deployment.chain import ChainClient, DeploymentReceipt
from swap_deployment.constants import SAED_SWAP_PLAN
from swap_deployment.plan import DeploymentPlan
from swap_deployment.utils import _load_yaml

CHAIN_ID = 1337
DEPLOYER = to_checksum_address("0x" + "de" * 20)

# Solidity output for a contract without constructor arguments is just the creation code
DUMMY_BYTECODE = "0x6080604052348015600f57600080fd5b50"


def address(index):
    return to_checksum_address(f"0x{index:040x}")


def constructor_abi(*inputs):
    abi_inputs = [
        {"name": name, "type": abi_type, "internalType": abi_type} for name, abi_type in inputs
    ]
    return [
        {"type": "constructor", "inputs": abi_inputs, "stateMutability": "nonpayable"},
        {
            "type": "function",
            "name": "owner",
            "inputs": [],
            "outputs": [{"name": "", "type": "address"}],
            "stateMutability": "view",
        },
    ]


TOKEN_ABI = constructor_abi(("owner", "address"))
SWAP_ABI = constructor_abi(("_saed", "address"), ("_susd", "address"), ("_usdt", "address"))


class FakeArtifactProvider(ArtifactProvider):
    def __init__(self, artifacts):
        self.artifacts = {artifact.name: artifact for artifact in artifacts}

    def get(self, name):
        try:
            return self.artifacts[name]
        except KeyError:
            raise ValueError(f"No contract found with name '{name}'.")


class FakeChainClient(ChainClient):
    """Confirms every deployment immediately, unless told to fail on a contract."""

    def __init__(self, fail_on=None, error=None):
        self.fail_on = fail_on
        self.error = error or RuntimeError("execution reverted: out of gas")
        self.submissions = list()

    @property
    def address(self):
        return DEPLOYER

    def submit(self, artifact, constructor_args):
        self.submissions.append((artifact.name, tuple(constructor_args)))
        if artifact.name == self.fail_on:
            raise self.error
        index = len(self.submissions)
        return DeploymentReceipt(
            address=address(0x1000 + index),
            tx_hash=f"0x{index:064x}",
            block_number=index,
            chain_id=CHAIN_ID,
            deployer=DEPLOYER,
        )


@pytest.fixture
def token_artifacts():
    return [
        ContractArtifact(name=name, abi=TOKEN_ABI, bytecode=DUMMY_BYTECODE)
        for name in ("SAED", "SUSD", "USDT")
    ]


@pytest.fixture
def swap_artifact():
    return ContractArtifact(name="SAEDSwap", abi=SWAP_ABI, bytecode=DUMMY_BYTECODE)


@pytest.fixture
def artifact_provider(token_artifacts, swap_artifact):
    return FakeArtifactProvider([*token_artifacts, swap_artifact])


@pytest.fixture
def client():
    return FakeChainClient()


@pytest.fixture
def saed_swap_config():
    return _load_yaml(SAED_SWAP_PLAN)


@pytest.fixture
def saed_swap_plan(artifact_provider):
    return DeploymentPlan.from_yaml(SAED_SWAP_PLAN, artifact_provider)
