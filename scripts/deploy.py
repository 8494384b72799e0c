#!/usr/bin/python3
from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from swap_deployment.artifacts import BuildArtifactProvider
from swap_deployment.constants import SAED_SWAP_PLAN
from swap_deployment.deployer import Deployer


@click.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@click.option(
    "--plan",
    "-p",
    "plan_filepath",
    help="Filepath of the deployment plan (constructor parameters YAML)",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=SAED_SWAP_PLAN,
    show_default=True,
)
@click.option(
    "--build-dir",
    "-b",
    help="Directory of compiled JSON build artifacts; defaults to the ape project",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    required=False,
)
@click.option(
    "--verify",
    help="Publish contract sources to the network's block explorer.",
    is_flag=True,
)
@click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
def cli(account, network, plan_filepath, build_dir, verify, auto):
    """Deploy every contract of a plan in dependency order."""
    click.echo(f"Connected to {network.name} network.")
    provider = BuildArtifactProvider(directory=build_dir) if build_dir else None
    deployer = Deployer.from_yaml(
        filepath=plan_filepath,
        verify=verify,
        account=account,
        autosign=auto,
        provider=provider,
    )
    deployer.run()


if __name__ == "__main__":
    cli()
