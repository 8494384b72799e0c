import typing
from collections import OrderedDict
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, NamedTuple, Optional, Sequence

from swap_deployment.artifacts import ArtifactProvider, ContractArtifact
from swap_deployment.params import (
    CONTRACT_CONSTRUCTOR_PARAMETER_KEY,
    CONTRACT_TYPE_KEY,
    InvalidParameters,
    ResolutionContext,
    VariableContext,
    process_raw_values,
    referenced_contracts,
    resolve_params,
    validate_constructor_abi_inputs,
)
from swap_deployment.utils import _load_yaml


class ContractSpec(NamedTuple):
    """A single contract to deploy: its name, compiled artifact and constructor template."""

    name: str
    artifact: ContractArtifact
    constructor: Mapping[str, Any]

    @property
    def references(self) -> List[str]:
        """Names of the contracts whose addresses this contract's constructor needs."""
        return referenced_contracts(self.constructor)

    def resolve(self, context: ResolutionContext) -> OrderedDict:
        """Resolves the constructor parameters for this contract."""
        return resolve_params(self.constructor, context)


def _get_contract_names(config: typing.Dict) -> List[str]:
    contract_names = list()
    for contract_info in config["contracts"]:
        if isinstance(contract_info, str):
            contract_names.append(contract_info)
        elif isinstance(contract_info, dict):
            contract_names.extend(list(contract_info.keys()))
        else:
            raise DeploymentPlan.Invalid("Malformed constructor parameters YAML.")

    return contract_names


class DeploymentPlan:
    """
    An ordered, immutable sequence of contracts to deploy.

    The order is a topological order of the dependency graph: every contract
    reference in a constructor template names a contract earlier in the plan.
    """

    class Invalid(InvalidParameters):
        """Raised when a plan is malformed or not in dependency order"""

    def __init__(self, specs: Sequence[ContractSpec], name: Optional[str] = None):
        self._specs = tuple(specs)
        self.name = name
        self.validate()

    def __iter__(self) -> Iterator[ContractSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __getitem__(self, index: int) -> ContractSpec:
        return self._specs[index]

    def __repr__(self):
        return f"DeploymentPlan({self.name or ''}: {' -> '.join(self.names)})"

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self._specs]

    def validate(self) -> None:
        """Checks uniqueness, dependency order and ABI conformance of every spec."""
        if not self._specs:
            raise self.Invalid("Deployment plan has no contracts.")

        seen = list()
        for position, spec in enumerate(self._specs):
            if spec.name in seen:
                raise self.Invalid(f"Contract {spec.name} appears more than once in the plan.")
            for reference in spec.references:
                if reference == spec.name:
                    raise self.Invalid(f"{spec.name} cannot reference its own address.")
                if reference not in seen:
                    raise self.Invalid(
                        f"{spec.name} (position {position}) references {reference}, "
                        f"which is not deployed before it."
                    )
            seen.append(spec.name)

            # eager validation - addresses are not known yet
            resolved = spec.resolve(ResolutionContext.for_validation())
            try:
                validate_constructor_abi_inputs(
                    contract_name=spec.name,
                    abi_inputs=spec.artifact.constructor_inputs,
                    resolved_parameters=resolved,
                )
            except InvalidParameters as e:
                raise self.Invalid(str(e)) from e

    @classmethod
    def from_config(cls, config: typing.Dict, provider: ArtifactProvider) -> "DeploymentPlan":
        """Builds a plan from a parsed params file, looking artifacts up with the provider."""
        print("Processing contract constructor parameters...")
        contracts = config.get("contracts")
        if not contracts:
            raise cls.Invalid("Constructor parameters file missing 'contracts' field.")

        contract_names = _get_contract_names(config)
        constants = config.get("constants")
        shadowed = sorted(set(constants or dict()) & set(contract_names))
        if shadowed:
            raise cls.Invalid(
                f"Constant name(s) {', '.join(shadowed)} collide with contract names in the plan."
            )
        specs = list()
        for contract_info in contracts:
            if isinstance(contract_info, str):
                contract_name, contract_data = contract_info, dict()
            elif isinstance(contract_info, dict):
                if len(contract_info) != 1:
                    raise cls.Invalid("Malformed constructor parameters YAML.")
                contract_name = list(contract_info.keys())[0]  # only one entry
                contract_data = contract_info[contract_name] or dict()
                if not isinstance(contract_data, dict):
                    raise cls.Invalid(
                        f"Malformed constructor parameter config for {contract_name}."
                    )
            else:
                raise cls.Invalid("Malformed constructor parameters YAML.")

            variable_context = VariableContext(
                contract_names=contract_names, constants=constants, contract_name=contract_name
            )
            try:
                constructor = process_raw_values(
                    contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict(),
                    variable_context,
                )
            except InvalidParameters as e:
                raise cls.Invalid(str(e)) from e

            contract_type = contract_data.get(CONTRACT_TYPE_KEY, contract_name)
            spec = ContractSpec(
                name=contract_name,
                artifact=provider.get(contract_type),
                constructor=MappingProxyType(constructor),
            )
            specs.append(spec)

        name = (config.get("deployment") or dict()).get("name")
        return cls(specs=specs, name=name)

    @classmethod
    def from_yaml(cls, filepath: Path, provider: ArtifactProvider) -> "DeploymentPlan":
        config = _load_yaml(filepath)
        return cls.from_config(config, provider)
