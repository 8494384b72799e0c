from typing import Any, Sequence

from ape import project
from ape.api import AccountAPI
from ape.contracts import ContractContainer
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from ethpm_types import ContractType

from swap_deployment.artifacts import ArtifactProvider, ContractArtifact
from swap_deployment.chain import ChainClient, DeploymentReceipt


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


class ApeArtifactProvider(ArtifactProvider):
    """Looks compiled contracts up in the active ape project and its dependencies."""

    def get(self, name: str) -> ContractArtifact:
        contract_type = get_contract_container(name).contract_type
        bytecode = None
        if contract_type.deployment_bytecode:
            bytecode = contract_type.deployment_bytecode.bytecode
        if not bytecode:
            raise ValueError(f"{name} has no deployment bytecode (abstract contract or interface?)")

        abi = [entry.model_dump(mode="json", by_alias=True) for entry in contract_type.abi]
        return ContractArtifact(name=name, abi=abi, bytecode=bytecode)


def _contract_container(artifact: ContractArtifact) -> ContractContainer:
    contract_type = ContractType.model_validate(
        {
            "contractName": artifact.name,
            "abi": artifact.abi,
            "deploymentBytecode": {"bytecode": artifact.bytecode},
        }
    )
    return ContractContainer(contract_type)


class ApeChainClient(ChainClient):
    """Deploys with an ape account on the connected network."""

    def __init__(self, account: AccountAPI, publish: bool = False):
        self.account = account
        self.publish = publish

    @property
    def address(self) -> ChecksumAddress:
        return to_checksum_address(self.account.address)

    def submit(
        self, artifact: ContractArtifact, constructor_args: Sequence[Any]
    ) -> DeploymentReceipt:
        container = _contract_container(artifact)
        instance = self.account.deploy(container, *constructor_args, publish=self.publish)
        receipt = instance.receipt
        return DeploymentReceipt(
            address=to_checksum_address(instance.address),
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
            chain_id=receipt.chain_id,
            deployer=to_checksum_address(receipt.transaction.sender),
        )
