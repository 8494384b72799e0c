from typing import Optional, Sequence

import click

from swap_deployment.orchestrator import DeploymentResult, OrchestrationError


def print_report(
    results: Sequence[DeploymentResult], failure: Optional[OrchestrationError] = None
) -> None:
    """Prints the confirmed deployments of a run and, if it failed, the failing step."""
    click.secho("\nDeployment report", fg="green")
    if not results:
        click.secho("    No contracts were deployed.", fg="yellow")
    for index, result in enumerate(results, start=1):
        click.secho(f"    {index}. {result.name} {result.address}", fg="cyan")
        click.echo(f"       tx {result.tx_hash} (block {result.block_number})")

    if failure is not None:
        click.secho(f"    {len(results) + 1}. {failure.name} FAILED: {failure}", fg="red")
        if results:
            click.secho(
                "    Contracts listed above remain deployed on chain.", fg="yellow"
            )
