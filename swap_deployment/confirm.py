from collections import OrderedDict

import click

from swap_deployment.constants import ZERO_ADDRESS


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    click.confirm(f"Deploy {contract_name}?", default=True, abort=True)


def _continue() -> None:
    """Asks the user to continue."""
    click.confirm("Continue?", default=True, abort=True)


def _confirm_zero_address() -> None:
    click.confirm(
        "Zero Address detected for deployment parameter; Continue?", default=False, abort=True
    )


def _contains_zero_address(value) -> bool:
    if isinstance(value, list):
        return any(_contains_zero_address(v) for v in value)
    return value == ZERO_ADDRESS


def confirm_resolution(contract_name: str, resolved_params: OrderedDict) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\nConstructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = _contains_zero_address(resolved_value)
    _confirm_deployment(contract_name)
    if contains_zero_address:
        _confirm_zero_address()
