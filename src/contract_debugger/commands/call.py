"""
Call - invoke one contract function and print the outcome.

Reads (view/pure) go through eth_call; anything else is sent as a
transaction and waited on. Parameters are given as ``-a name=value`` in the
same raw string form the interactive console accepts.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..chain.abi import AbiFunction
from ..chain.networks import DEFAULT_NETWORK, NETWORKS
from ..debugger.catalog import load_catalog
from ..debugger.session import AuthMethod, DebuggerSession
from ..exceptions import DebuggerError
from ..models import InvocationResult
from ..wallet.eth import load_private_key
from .render import echo_result, label


def parse_arg_pairs(function: AbiFunction, raw_args: tuple[str, ...]) -> dict[str, str]:
    """
    Map ``name=value`` (or bare positional) strings onto parameter names.

    Raises:
        click.BadParameter: On unknown names or too many positional values
    """
    names = [p.name for p in function.inputs]
    values: dict[str, str] = {}
    position = 0
    for raw in raw_args:
        name, sep, value = raw.partition("=")
        if sep and name in names:
            values[name] = value
            continue
        if sep and name.isidentifier():
            raise click.BadParameter(
                f"{function.name} has no parameter '{name}' (expected: {', '.join(names) or 'none'})",
                param_hint="--arg",
            )
        if position >= len(names):
            raise click.BadParameter(
                f"{function.name} takes {len(names)} parameters", param_hint="--arg"
            )
        values[names[position]] = raw
        position += 1
    return values


async def run_call(
    contracts_dir: Optional[Path],
    contract: str,
    function_name: str,
    raw_args: tuple[str, ...],
    network: str,
    auth_method: AuthMethod,
    private_key: Optional[str],
) -> tuple[str, InvocationResult]:
    session = DebuggerSession(load_catalog(contracts_dir))
    try:
        await session.select_network(network)
        await session.select_contract(contract)
        await session.connect(auth_method, private_key=private_key)

        function = session.function(function_name, arity=len(raw_args))
        for name, value in parse_arg_pairs(function, raw_args).items():
            session.set_input(function.name, name, value)

        result = await session.invoke(function.signature)
        wallet_address = session.state.wallet_address or ""
    finally:
        await session.aclose()
    return wallet_address, result


@click.command()
@click.argument("contract")
@click.argument("function_name")
@click.option("--arg", "-a", "raw_args", multiple=True, help="Parameter as name=value (repeatable)")
@click.option(
    "--network",
    "-n",
    type=click.Choice(sorted(NETWORKS)),
    default=DEFAULT_NETWORK,
    show_default=True,
    help="Network to connect to",
)
@click.option("--private-key", envvar="PRIVATE_KEY", default=None, help="Sign with this private key")
@click.option("--node-wallet", is_flag=True, help="Use the node's own account instead of a key")
@click.option("--json", "as_json", is_flag=True, help="Print the result record as JSON")
@click.pass_context
def call(
    ctx: click.Context,
    contract: str,
    function_name: str,
    raw_args: tuple[str, ...],
    network: str,
    private_key: Optional[str],
    node_wallet: bool,
    as_json: bool,
) -> None:
    """
    Invoke FUNCTION_NAME on CONTRACT.

    CONTRACT is the display name shown by the 'contracts' command.
    FUNCTION_NAME is a name or, for overloaded functions, a full signature
    such as 'safeTransferFrom(address,address,uint256)'. A bare overloaded
    name picks the overload taking as many arguments as were given.
    """
    if not node_wallet and not private_key:
        private_key = load_private_key()
    auth_method = AuthMethod.NODE if node_wallet or not private_key else AuthMethod.PRIVATE_KEY

    try:
        wallet_address, result = asyncio.run(
            run_call(
                ctx.obj["contracts_dir"],
                contract,
                function_name,
                raw_args,
                network,
                auth_method,
                private_key,
            )
        )
    except DebuggerError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        label("Network", NETWORKS[network].name)
        label("Wallet", wallet_address)
        label("Connection", auth_method.label)
        click.echo()
        echo_result(result)

    if not result.ok:
        sys.exit(1)
