import typing
from pathlib import Path
from typing import Optional, Tuple

from ape import networks
from ape.api import AccountAPI
from ape.cli.choices import select_account

from swap_deployment.ape_adapters import ApeArtifactProvider, ApeChainClient
from swap_deployment.artifacts import ArtifactProvider
from swap_deployment.confirm import _continue, confirm_resolution
from swap_deployment.networks import check_plugins, get_chain_id, is_local_network, verify_contracts
from swap_deployment.orchestrator import DeploymentResult, OrchestrationError, Orchestrator
from swap_deployment.plan import DeploymentPlan
from swap_deployment.registry import registry_from_results
from swap_deployment.report import print_report
from swap_deployment.utils import _load_yaml, validate_config


class Deployer:
    """
    Represents an ape account plus a validated deployment plan,
    with interactive confirmation of each step.
    """

    def __init__(
        self,
        config: typing.Dict,
        path: Path,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        provider: Optional[ArtifactProvider] = None,
    ):
        if account is None:
            account = select_account()
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
            if hasattr(account, "set_autosign"):  # test accounts never prompt
                account.set_autosign(True)
        self._account = account
        self._autosign = autosign

        check_plugins(verify=verify)
        self.path = path
        self.config = config
        self.verify = verify
        self.registry_filepath = validate_config(
            config=self.config, chain_id=get_chain_id(), live_deployment=not is_local_network()
        )
        self.plan = DeploymentPlan.from_config(self.config, provider or ApeArtifactProvider())

        self.client = ApeChainClient(account=self._account)
        self.orchestrator = Orchestrator(
            client=self.client, confirm=None if autosign else confirm_resolution
        )
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        return cls(config, filepath, *args, **kwargs)

    def run(self) -> Tuple[DeploymentResult, ...]:
        """Deploys the whole plan, then publishes the results."""
        try:
            results = self.orchestrator.run(self.plan)
        except OrchestrationError as e:
            print_report(e.results, failure=e)
            raise
        print_report(results)
        self.finalize(results)
        return results

    def finalize(self, results: Tuple[DeploymentResult, ...]) -> None:
        """
        Publishes the deployments to the registry and optionally to block explorers.
        """
        registry_from_results(
            results=results,
            plan=self.plan,
            output_filepath=self.registry_filepath,
        )
        if self.verify:
            verify_contracts([(result.name, result.address) for result in results])

    def _print_deployment_info(self):
        print(
            f"Account: {self._account.address}",
            f"Config: {self.path}",
            f"Plan: {self.plan}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
