"""
Console - interactive debugging session.

Walks through network, contract and wallet selection, then renders a form
for every contract function. Field values are remembered for the whole
session, so re-running a function only asks to confirm or edit them.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from ..chain.abi import AbiFunction
from ..chain.networks import NETWORKS
from ..debugger.catalog import Catalog, load_catalog
from ..debugger.session import AuthMethod, DebuggerSession
from ..exceptions import DebuggerError, FunctionNotFoundError, WalletConnectionError
from ..wallet.eth import load_private_key
from .render import echo_contract, echo_function, echo_network, echo_result, label, section

HELP = """\
  <number> | <name>    fill in and run a function
  list                 show the functions again
  history              show every result, most recent first
  network              switch network (reconnects)
  contract             switch contract (reconnects)
  help                 show this help
  quit                 leave the console"""


def _choose_network(runner: asyncio.Runner, session: DebuggerSession) -> None:
    section("Network")
    for network in session.networks.values():
        echo_network(network)
    click.echo()
    key = click.prompt(
        "  Network",
        type=click.Choice(list(session.networks)),
        default=session.state.network,
    )
    runner.run(session.select_network(key))


def _choose_contract(runner: asyncio.Runner, session: DebuggerSession, catalog: Catalog) -> None:
    section("Contract")
    click.echo(f"  Found {len(catalog)} contracts in {catalog.directory}")
    click.echo()
    descriptors = list(catalog)
    for index, descriptor in enumerate(descriptors, start=1):
        echo_contract(descriptor, index)
    click.echo()
    choice = click.prompt("  Contract", type=click.IntRange(1, len(descriptors)), default=1)
    descriptor = runner.run(session.select_contract(descriptors[choice - 1].name))
    label("Address", descriptor.address)
    label("Functions", str(len(descriptor.functions)))
    click.echo()


def _connect(
    runner: asyncio.Runner,
    session: DebuggerSession,
    auth_method: Optional[AuthMethod],
    private_key: Optional[str],
) -> bool:
    section("Wallet Connection")
    while True:
        method = auth_method
        if method is None:
            method = AuthMethod(
                click.prompt(
                    "  Connect with",
                    type=click.Choice([m.value for m in AuthMethod]),
                    default=AuthMethod.PRIVATE_KEY.value if private_key else AuthMethod.NODE.value,
                )
            )
        key = private_key
        if method is AuthMethod.PRIVATE_KEY and not key:
            click.secho(
                "  Warning: entering a private key is not recommended for production use.",
                fg="yellow",
            )
            key = click.prompt("  Private key", hide_input=True, default="", show_default=False)

        click.echo("  Connecting...")
        try:
            runner.run(session.connect(method, private_key=key))
        except WalletConnectionError:
            click.secho(f"  {session.state.connection_error}", fg="red")
            if not click.confirm("  Retry?", default=True):
                return False
            auth_method = None
            if method is AuthMethod.PRIVATE_KEY:
                # Ask again rather than retrying the rejected key
                private_key = None
            continue

        click.secho("  Connected", fg="green")
        label("Network", session.network.name)
        label("Wallet", session.state.wallet_address or "")
        label("Connection", method.label)
        click.echo()
        return True


def _list_functions(session: DebuggerSession) -> None:
    found = session.functions
    section(f"Contract Functions ({len(found)})")
    for index, function in enumerate(found, start=1):
        echo_function(
            function,
            index,
            latest=session.latest(function.name),
            loading=session.is_loading(function.name),
        )
    click.echo()


def _resolve_function(session: DebuggerSession, command: str) -> AbiFunction:
    """
    Resolve a list number, a function name or a full signature.

    Raises:
        FunctionNotFoundError: If nothing matches or the name is overloaded
    """
    found = session.functions
    if command.isdigit():
        index = int(command)
        if 1 <= index <= len(found):
            return found[index - 1]
        raise FunctionNotFoundError(f"No function number {index}")
    return session.function(command)


def _fill_and_run(runner: asyncio.Runner, session: DebuggerSession, function: AbiFunction) -> None:
    echo_function(function)
    current = session.get_inputs(function.name)
    for param in function.inputs:
        value = click.prompt(
            f"    {param.name or '_'} ({param.type})",
            default=current.get(param.name, ""),
            show_default=bool(current.get(param.name)),
        )
        session.set_input(function.name, param.name, value)

    if not function.is_read_only:
        click.echo("  Sending transaction and waiting for receipt...")
    result = runner.run(session.invoke(function.signature))
    echo_result(result)
    click.echo()


def _history(session: DebuggerSession) -> None:
    entries = session.results.entries
    section(f"Results ({len(entries)})")
    if not entries:
        click.echo("  No results yet.")
    for result in entries:
        echo_result(result)
    click.echo()


@click.command()
@click.option(
    "--network",
    "-n",
    type=click.Choice(sorted(NETWORKS)),
    default=None,
    help="Start on this network instead of asking",
)
@click.option("--private-key", envvar="PRIVATE_KEY", default=None, help="Sign with this private key")
@click.option("--node-wallet", is_flag=True, help="Use the node's own account instead of a key")
@click.pass_context
def console(
    ctx: click.Context,
    network: Optional[str],
    private_key: Optional[str],
    node_wallet: bool,
) -> None:
    """Interactive session: pick a contract, connect, call functions."""
    catalog = load_catalog(ctx.obj["contracts_dir"])
    if not len(catalog):
        click.secho(f"No contracts found in {catalog.directory}", fg="yellow")
        sys.exit(1)

    if not node_wallet and not private_key:
        private_key = load_private_key()
    auth_method: Optional[AuthMethod] = None
    if node_wallet:
        auth_method = AuthMethod.NODE
    elif private_key:
        auth_method = AuthMethod.PRIVATE_KEY

    session = DebuggerSession(catalog)
    with asyncio.Runner() as runner:
        try:
            if network:
                runner.run(session.select_network(network))
            else:
                _choose_network(runner, session)
            _choose_contract(runner, session, catalog)
            if not _connect(runner, session, auth_method, private_key):
                return

            _list_functions(session)
            click.echo(HELP)
            click.echo()
            while True:
                command = click.prompt("debugger", default="list", show_default=False).strip()
                match command:
                    case "quit" | "exit" | "q":
                        return
                    case "help" | "?":
                        click.echo(HELP)
                    case "list" | "ls":
                        _list_functions(session)
                    case "history":
                        _history(session)
                    case "network":
                        _choose_network(runner, session)
                        if not _connect(runner, session, auth_method, private_key):
                            return
                        _list_functions(session)
                    case "contract":
                        _choose_contract(runner, session, catalog)
                        if not _connect(runner, session, auth_method, private_key):
                            return
                        _list_functions(session)
                    case _:
                        try:
                            function = _resolve_function(session, command)
                        except FunctionNotFoundError as exc:
                            click.secho(f"  Unknown command or function: {command} ({exc})", fg="red")
                            continue
                        _fill_and_run(runner, session, function)
        except click.Abort:
            click.echo()
        except DebuggerError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(exc.exit_code)
        finally:
            runner.run(session.aclose())
