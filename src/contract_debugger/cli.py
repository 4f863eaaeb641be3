"""
contract-debugger CLI

Debug and interact with smart contracts described by local descriptor
files ({"address": ..., "abi": [...]}).

Commands:
  networks   - Show the available networks
  contracts  - List contracts in the descriptor directory
  functions  - Show the functions of a contract
  call       - Invoke a single function
  console    - Interactive session over all functions of a contract
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .debugger.catalog import CONTRACTS_DIR_ENV

package_logger = logging.getLogger("contract_debugger")


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("     SMART CONTRACT DEBUGGER", fg="bright_white", bold=True)
        + click.style(f"   v{__version__}", dim=True)
    )
    click.secho("        ─── select · connect · call ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


def cli_logger_config(verbose: bool) -> None:
    """Route package logs through rich on stderr."""
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(show_path=False, console=Console(stderr=True)))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="contract-debugger")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
@click.option(
    "--contracts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=CONTRACTS_DIR_ENV,
    default=None,
    help="Directory holding contract descriptor files (default: ./public/contracts)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, contracts_dir: Optional[Path]) -> None:
    """Smart Contract Debugger - call any contract function from its ABI."""
    cli_logger_config(verbose)
    ctx.ensure_object(dict)
    ctx.obj["contracts_dir"] = contracts_dir

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.catalog import contracts, functions, networks
from .commands.call import call
from .commands.console import console

cli.add_command(networks)
cli.add_command(contracts)
cli.add_command(functions)
cli.add_command(call)
cli.add_command(console)


# ============ Entry Points ============


def main() -> None:
    """contract-debugger entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: non-tty
    cli()


if __name__ == "__main__":
    main()
