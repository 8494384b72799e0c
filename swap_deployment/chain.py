from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Sequence

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3 import Web3

from swap_deployment.artifacts import ContractArtifact


class DeploymentReceipt(NamedTuple):
    """On-chain outcome of one confirmed contract creation."""

    address: ChecksumAddress
    tx_hash: str
    block_number: int
    chain_id: int
    deployer: ChecksumAddress


class TransactionReverted(Exception):
    """Raised when a contract creation transaction is mined but fails."""

    def __init__(self, tx_hash: str, contract_name: str):
        self.tx_hash = tx_hash
        self.contract_name = contract_name
        super().__init__(f"Deployment of {contract_name} reverted in transaction {tx_hash}")


class ChainClient(ABC):
    """Submits contract creations and blocks until they are confirmed."""

    @property
    @abstractmethod
    def address(self) -> ChecksumAddress:
        """The account deployments are sent from."""
        raise NotImplementedError

    @abstractmethod
    def submit(
        self, artifact: ContractArtifact, constructor_args: Sequence[Any]
    ) -> DeploymentReceipt:
        raise NotImplementedError


def _to_hex(value: Any) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return Web3.to_hex(value)


class Web3ChainClient(ChainClient):
    """
    Deploys through a web3.py connection using an account unlocked on the node
    (e.g. a ganache or anvil development account).
    """

    def __init__(self, w3: Web3, sender: str, timeout: float = 120):
        self.w3 = w3
        self._sender = to_checksum_address(sender)
        self.timeout = timeout

    @property
    def address(self) -> ChecksumAddress:
        return self._sender

    def submit(
        self, artifact: ContractArtifact, constructor_args: Sequence[Any]
    ) -> DeploymentReceipt:
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        tx_hash = factory.constructor(*constructor_args).transact({"from": self._sender})
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.timeout)
        if receipt["status"] == 0:
            raise TransactionReverted(tx_hash=_to_hex(tx_hash), contract_name=artifact.name)

        return DeploymentReceipt(
            address=to_checksum_address(receipt["contractAddress"]),
            tx_hash=_to_hex(receipt["transactionHash"]),
            block_number=int(receipt["blockNumber"]),
            chain_id=self.w3.eth.chain_id,
            deployer=self._sender,
        )
