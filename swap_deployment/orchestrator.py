from typing import Any, Callable, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from eth_typing import ChecksumAddress

from swap_deployment.chain import ChainClient
from swap_deployment.params import ResolutionContext
from swap_deployment.plan import ContractSpec


class DeploymentResult(NamedTuple):
    """A confirmed deployment. Created once per contract and never mutated."""

    name: str
    address: ChecksumAddress
    tx_hash: str
    block_number: int
    chain_id: int
    deployer: ChecksumAddress
    constructor_args: Tuple[Any, ...]


class OrchestrationError(Exception):
    """Base class for fatal orchestration failures; carries the completed deployments."""

    def __init__(self, name: str, message: str, results: Sequence[DeploymentResult] = ()):
        self.name = name
        self.results = tuple(results)
        super().__init__(message)


class UnresolvedDependency(OrchestrationError):
    """Raised when a constructor references a contract that has not been deployed."""

    def __init__(self, name: str, reference: str, results: Sequence[DeploymentResult] = ()):
        self.reference = reference
        super().__init__(
            name=name,
            message=f"{name} references {reference}, which has not been deployed.",
            results=results,
        )


class DeploymentFailed(OrchestrationError):
    """Raised when submitting or confirming a deployment fails."""

    def __init__(self, name: str, cause: BaseException, results: Sequence[DeploymentResult] = ()):
        self.cause = cause
        super().__init__(
            name=name,
            message=f"Deployment of {name} failed: {cause}",
            results=results,
        )


ConfirmHook = Callable[[str, Mapping[str, Any]], None]


class Orchestrator:
    """
    Deploys the contracts of a plan one at a time, in plan order,
    threading the addresses of earlier deployments into later constructors.

    There is no retry and no rollback: a failure ends the run and contracts
    deployed before it remain on chain (they are attached to the raised error).
    """

    def __init__(self, client: ChainClient, confirm: Optional[ConfirmHook] = None):
        self.client = client
        self.confirm = confirm

    def run(self, plan: Iterable[ContractSpec]) -> Tuple[DeploymentResult, ...]:
        results: List[DeploymentResult] = list()
        for spec in plan:
            result = self._deploy(spec, results)
            results.append(result)
        return tuple(results)

    def _deploy(self, spec: ContractSpec, results: List[DeploymentResult]) -> DeploymentResult:
        addresses = {result.name: result.address for result in results}
        for reference in spec.references:
            if reference not in addresses:
                raise UnresolvedDependency(name=spec.name, reference=reference, results=results)

        context = ResolutionContext(deployer=self.client.address, addresses=addresses)
        resolved_params = spec.resolve(context)
        if self.confirm:
            self.confirm(spec.name, resolved_params)

        constructor_args = tuple(resolved_params.values())
        print(f"\nDeploying {spec.name}...")
        try:
            receipt = self.client.submit(spec.artifact, constructor_args)
        except Exception as e:
            raise DeploymentFailed(name=spec.name, cause=e, results=results) from e

        print(f"'{spec.name}' deployed to: {receipt.address} (tx {receipt.tx_hash})")
        return DeploymentResult(
            name=spec.name,
            address=receipt.address,
            tx_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            chain_id=receipt.chain_id,
            deployer=receipt.deployer,
            constructor_args=constructor_args,
        )
