import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from web3.auto import w3

from swap_deployment.constants import ZERO_ADDRESS

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"
CONTRACT_TYPE_KEY = "contract_type"


class InvalidParameters(ValueError):
    """Raised when constructor parameters cannot be parsed or do not match the ABI."""


class VariableContext:
    def __init__(
        self,
        contract_names: List[str],
        contract_name: str,
        constants: typing.Dict[str, Any] = None,
    ):
        self.contract_names = contract_names or list()
        self.contract_name = contract_name
        self.constants = constants or dict()


class ResolutionContext(NamedTuple):
    """Everything a variable may be resolved against during a deployment run."""

    deployer: Optional[str] = None
    addresses: Mapping[str, str] = MappingProxyType({})
    eager: bool = False

    @classmethod
    def for_validation(cls) -> "ResolutionContext":
        """A context in which nothing is deployed yet; references resolve to the zero address."""
        return cls(deployer=None, addresses=MappingProxyType({}), eager=True)


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self, context: ResolutionContext) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self, context: ResolutionContext) -> Any:
        if context.deployer is None:
            return ZERO_ADDRESS
        return context.deployer

    def __repr__(self):
        return f"{self.VARIABLE_PREFIX}{self.DEPLOYER_INDICATOR}"


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise InvalidParameters(f"Constant '{constant_name}' not found in deployment file.")
        self.constant_name = constant_name

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self, context: ResolutionContext) -> Any:
        return self.constant_value

    def __repr__(self):
        return f"{self.VARIABLE_PREFIX}{self.constant_name}"


class ContractReference(Variable):
    """The address of another contract deployed by the same plan."""

    def __init__(self, contract_name: str, context: VariableContext):
        if contract_name not in context.contract_names:
            raise InvalidParameters(
                f"Contract name {contract_name} referenced by {context.contract_name} not found"
            )
        self.contract_name = contract_name

    def resolve(self, context: ResolutionContext) -> Any:
        """Resolves a contract address."""
        try:
            return context.addresses[self.contract_name]
        except KeyError:
            if context.eager:
                return ZERO_ADDRESS
            raise

    def __repr__(self):
        return f"{self.VARIABLE_PREFIX}{self.contract_name}"


def _resolve_param(value: Any, context: ResolutionContext) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v, context) for v in value]

    if isinstance(value, Variable):
        return value.resolve(context)

    return value  # literally a value


def resolve_params(parameters: Mapping[str, Any], context: ResolutionContext) -> OrderedDict:
    resolved_parameters = OrderedDict()
    for name, value in parameters.items():
        resolved_parameters[name] = _resolve_param(value, context)

    return resolved_parameters


def _references_in(value: Any) -> List[str]:
    if isinstance(value, list):
        return [name for v in value for name in _references_in(v)]
    if isinstance(value, ContractReference):
        return [value.contract_name]
    return []


def referenced_contracts(parameters: Mapping[str, Any]) -> List[str]:
    """Returns the names of all contracts referenced by a parameter set, in order of appearance."""
    names = list()
    for value in parameters.values():
        for name in _references_in(value):
            if name not in names:
                names.append(name)
    return names


def _variable_from_value(variable: Any, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount()
    elif variable in context.contract_names:
        # contract names take precedence over the upper-case constant convention
        return ContractReference(variable, context)
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    else:
        return ContractReference(variable, context)


def _process_raw_value(value: Any, variable_context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, variable_context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, variable_context)

    return value


def process_raw_values(values: Mapping, variable_context: VariableContext) -> OrderedDict:
    processed_parameters = OrderedDict()
    for name, value in values.items():
        processed_parameters[name] = _process_raw_value(value, variable_context)

    return processed_parameters


def _abi_type(abi_input: Dict[str, Any]) -> str:
    """Returns the canonical type string of an ABI input, expanding tuples."""
    abi_type = abi_input["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    components = ",".join(_abi_type(c) for c in abi_input.get("components", []))
    return f"({components}){abi_type[len('tuple'):]}"


def validate_constructor_abi_inputs(
    contract_name: str,
    abi_inputs: List[Dict[str, Any]],
    resolved_parameters: Mapping[str, Any],
) -> None:
    """Validates the constructor parameters against the constructor ABI."""
    if len(resolved_parameters) != len(abi_inputs):
        raise InvalidParameters(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(resolved_parameters)}."
        )
    if not abi_inputs:
        return  # no constructor parameters

    codex = enumerate(zip(abi_inputs, resolved_parameters.items()), start=0)
    for position, (abi_input, resolved_input) in codex:
        name, value = resolved_input
        # validate name
        if abi_input.get("name") != name:
            raise InvalidParameters(
                f"{contract_name} constructor parameter '{name}' at position {position} does not "
                f"match the expected ABI name '{abi_input.get('name')}'."
            )

        # validate value type
        abi_type = _abi_type(abi_input)
        if not w3.is_encodable(abi_type, value):
            raise InvalidParameters(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_type}'"
            )
