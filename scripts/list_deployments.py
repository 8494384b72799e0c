#!/usr/bin/python3

from itertools import groupby
from pathlib import Path
from typing import List

import click
from ape.cli import ConnectedProviderCommand

from swap_deployment.networks import get_chain_name
from swap_deployment.registry import RegistryEntry, read_registry


def _format_chain_name(chain_name: str) -> str:
    """Format the chain name to capitalize each word and join with slashes."""
    return "/".join(word.capitalize() for word in chain_name.split())


def _display_registry_entries(registry_filepath: Path, entries: List[RegistryEntry]) -> None:
    """Display registry entries grouped by chain ID."""
    click.secho(f"\n{registry_filepath.name}", fg="green")
    grouped_entries = groupby(entries, key=lambda e: e.chain_id)
    for chain_id, chain_entries in grouped_entries:
        try:
            chain_name = _format_chain_name(get_chain_name(chain_id))
        except ValueError:
            chain_name = f"Chain {chain_id}"
        click.secho(f"    {chain_name}", fg="yellow")

        for index, entry in enumerate(chain_entries, start=1):
            click.secho(f"        {index}. {entry.name} {entry.address}", fg="cyan")
            if entry.constructor_args:
                args = ", ".join(str(arg) for arg in entry.constructor_args)
                click.echo(f"           constructor({args})")


@click.command(cls=ConnectedProviderCommand, name="list-deployments")
@click.option(
    "--registry-filepath",
    "-f",
    help="Registry written by a deployment",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)
def cli(registry_filepath):
    """List all contracts in a deployment registry."""
    entries = read_registry(filepath=registry_filepath)
    _display_registry_entries(registry_filepath, entries)


if __name__ == "__main__":
    cli()
