"""Terminal rendering shared by the debugger commands."""

from __future__ import annotations

import json
from typing import Any, Optional

import click

from ..chain.abi import AbiFunction, StateMutability
from ..chain.networks import Network
from ..models import ContractDescriptor, InvocationResult
from ..utils import to_rfc3339

_MUTABILITY_COLORS = {
    StateMutability.VIEW: "blue",
    StateMutability.PURE: "blue",
    StateMutability.PAYABLE: "green",
    StateMutability.NONPAYABLE: "yellow",
}

_MUTABILITY_ICONS = {
    StateMutability.VIEW: "◉",
    StateMutability.PURE: "◉",
    StateMutability.PAYABLE: "$",
    StateMutability.NONPAYABLE: "⚡",
}


def badge(mutability: StateMutability) -> str:
    color = _MUTABILITY_COLORS[mutability]
    return click.style(f"{_MUTABILITY_ICONS[mutability]} {mutability.value}", fg=color)


def section(title: str) -> None:
    click.secho(f"  {title} " + "─" * max(0, 40 - len(title)), fg="cyan")
    click.echo()


def label(name: str, value: str, width: int = 13) -> None:
    click.echo(click.style(f"  {name + ':':<{width}}", dim=True) + click.style(value, fg="bright_white"))


def dumps(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


def echo_network(network: Network) -> None:
    click.echo(
        click.style(f"  {network.key:<8}", fg="bright_white", bold=True)
        + click.style(f"{network.name}", fg="cyan")
        + click.style(f"  {network.description}", dim=True)
    )
    click.echo(click.style(f"            RPC URL: {network.rpc_url}", dim=True))


def echo_contract(descriptor: ContractDescriptor, index: Optional[int] = None) -> None:
    prefix = f"  [{index}] " if index is not None else "  "
    count = len(descriptor.functions)
    click.echo(
        click.style(prefix, dim=True)
        + click.style(descriptor.name, fg="bright_white", bold=True)
        + click.style(f"  {descriptor.address}", dim=True)
        + click.style(f"  ({count} functions)", fg="cyan")
    )


def echo_function(
    function: AbiFunction,
    index: Optional[int] = None,
    latest: Optional[InvocationResult] = None,
    loading: bool = False,
) -> None:
    prefix = f"  [{index}] " if index is not None else "  "
    params = ", ".join(f"{p.type} {p.name}".strip() for p in function.inputs)
    line = (
        click.style(prefix, dim=True)
        + click.style(function.name, fg="bright_white", bold=True)
        + click.style(f"({params})", dim=True)
        + "  "
        + badge(function.state_mutability)
    )
    if function.outputs:
        returns = ", ".join(p.type for p in function.outputs)
        line += click.style(f"  -> {returns}", dim=True)
    if loading:
        line += click.style("  running...", fg="yellow")
    elif latest is not None:
        line += click.style("  ✓" if latest.ok else "  ✗", fg="green" if latest.ok else "red")
    click.echo(line)


def echo_result(result: InvocationResult) -> None:
    stamp = to_rfc3339(result.timestamp)
    if result.ok:
        click.secho(f"  ✓ {result.function_name}  {stamp}", fg="green")
    else:
        click.secho(f"  ✗ {result.function_name}  {stamp}", fg="red")

    if result.inputs:
        click.echo(click.style("    Inputs: ", dim=True) + json.dumps(result.inputs))
    if result.transaction_hash:
        click.echo(click.style("    TX:     ", dim=True) + result.transaction_hash)
    if result.gas_used:
        click.echo(click.style("    Gas:    ", dim=True) + result.gas_used)
    if result.error is not None:
        click.secho(f"    Error:  {result.error}", fg="red")
    else:
        rendered = dumps(result.result).replace("\n", "\n            ")
        click.echo(click.style("    Result: ", dim=True) + rendered)


def function_summary(function: AbiFunction) -> dict[str, Any]:
    return {
        "name": function.name,
        "signature": function.signature,
        "stateMutability": function.state_mutability.value,
        "inputs": [{"name": p.name, "type": p.type} for p in function.inputs],
        "outputs": [{"name": p.name, "type": p.type} for p in function.outputs],
    }
