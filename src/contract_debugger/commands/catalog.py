"""
Catalog commands - inspect networks, descriptor files and their functions.

None of these touch the network.
"""

from __future__ import annotations

import sys

import click

from ..chain.networks import DEFAULT_NETWORK, NETWORKS
from ..debugger.catalog import load_catalog
from ..exceptions import ContractNotFoundError
from .render import dumps, echo_contract, echo_function, echo_network, function_summary, section


@click.command()
def networks() -> None:
    """List the networks a session can connect to."""
    section("Networks")
    for key, network in NETWORKS.items():
        echo_network(network)
        if key == DEFAULT_NETWORK:
            click.secho("            (default)", fg="cyan")
    click.echo()


@click.command()
@click.pass_context
def contracts(ctx: click.Context) -> None:
    """List contracts found in the descriptor directory."""
    catalog = load_catalog(ctx.obj["contracts_dir"])

    if not len(catalog):
        click.echo(f"No contracts found in {catalog.directory}")
        return

    click.echo(f"Found {len(catalog)} contracts in {catalog.directory}")
    click.echo()
    for index, descriptor in enumerate(catalog, start=1):
        echo_contract(descriptor, index)


@click.command()
@click.argument("contract")
@click.option("--json", "as_json", is_flag=True, help="Print the functions as JSON")
@click.pass_context
def functions(ctx: click.Context, contract: str, as_json: bool) -> None:
    """Show the callable functions of CONTRACT."""
    catalog = load_catalog(ctx.obj["contracts_dir"])
    try:
        descriptor = catalog.get(contract)
    except ContractNotFoundError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    if as_json:
        click.echo(dumps([function_summary(f) for f in descriptor.functions]))
        return

    found = descriptor.functions
    click.echo(f"  Contract:  {descriptor.name}")
    click.echo(f"  Address:   {descriptor.address}")
    click.echo(f"  Functions: {len(found)}")
    click.echo()
    for index, function in enumerate(found, start=1):
        echo_function(function, index)
