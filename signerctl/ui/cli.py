"""Main CLI entry point - one subcommand per launcher operation."""

import logging
import sys
from datetime import datetime
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from signerctl.core.configs import LauncherConfig, get_launcher_config
from signerctl.core.errors import SignerError
from signerctl.core.provisioner import BinaryProvisioner
from signerctl.core.trust_session import TrustSessionStore
from signerctl.daemon.client import DaemonClient
from signerctl.daemon.launcher import LaunchOrchestrator, LaunchState
from signerctl.daemon.process import LaunchMode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="signerctl - start and talk to the local key signer daemon.",
)

console = Console()
err_console = Console(stderr=True)


# ============================================================================
# Shared Setup
# ============================================================================

@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log launch decisions"),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load_config() -> LauncherConfig:
    """Load config. Exits on error."""
    try:
        return get_launcher_config()
    except ValueError as e:
        err_console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


def _fail(error: SignerError) -> NoReturn:
    err_console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def install() -> None:
    """Install the bundled signer binary (no-op if already installed)."""
    config = _load_config()
    orchestrator = LaunchOrchestrator.from_config(config)
    try:
        path = orchestrator.provisioner.ensure_installed()
    except SignerError as e:
        _fail(e)
    typer.echo(str(path))


@app.command()
def launch(
    mode: str = typer.Argument(
        LaunchMode.RUN_DAEMON.value,
        help="Signer subcommand: init, daemon or add-account",
    ),
) -> None:
    """
    Start the signer.

    'daemon' starts silently when a trust session is valid and falls back
    to a terminal otherwise; 'init' and 'add-account' always open a terminal.
    """
    config = _load_config()
    orchestrator = LaunchOrchestrator.from_config(config)
    try:
        result = orchestrator.launch(mode)
    except SignerError as e:
        _fail(e)

    if result.trust_invalidated:
        err_console.print("[yellow]Trust session expired or rejected - removed.[/yellow]")
    color = "green" if result.state is LaunchState.BACKGROUND else "cyan"
    console.print(f"[{color}]{result.message}[/{color}]")


@app.command()
def request(
    payload: str = typer.Argument(..., help="Request line, or '-' to read it from stdin"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0.1, help="Read/write timeout in seconds"
    ),
) -> None:
    """
    Send one request line to the running daemon and print the response.

    Example: signerctl request '{"id":1,"method":"get_public_key","params":{}}'
    """
    config = _load_config()
    if payload == "-":
        payload = sys.stdin.readline().rstrip("\r\n")

    client = DaemonClient(config.socket_path, timeout=config.request_timeout)
    try:
        response = client.send(payload, timeout=timeout)
    except SignerError as e:
        _fail(e)
    typer.echo(response)


@app.command()
def status() -> None:
    """Show binary, trust session and socket state."""
    config = _load_config()
    session = TrustSessionStore(config.trust_session_path).load()

    table = Table(title="Signer status", show_header=False)
    table.add_column("Item", style="bold")
    table.add_column("Value")

    if BinaryProvisioner(config.binary_path, []).is_installed():
        binary_state = "[green](installed)[/green]"
    elif config.binary_path.exists():
        binary_state = "[red](not executable)[/red]"
    else:
        binary_state = "[red](missing)[/red]"
    table.add_row("Binary", f"{config.binary_path} {binary_state}")

    if session is None:
        table.add_row("Trust session", "[yellow]none[/yellow]")
    else:
        try:
            expiry = datetime.fromtimestamp(session.expires_at).isoformat(sep=" ")
        except (OverflowError, OSError, ValueError):
            expiry = str(session.expires_at)
        state = "[green]valid[/green]" if session.is_valid() else "[red]expired[/red]"
        table.add_row("Trust session", f"{state} until {expiry}")

    socket_present = config.socket_path.exists()
    table.add_row(
        "Socket",
        f"{config.socket_path} " + ("[green](present)[/green]" if socket_present else "[yellow](absent)[/yellow]"),
    )

    console.print(table)


@app.command()
def cancel() -> None:
    """Kill a running signer daemon (only 'daemon' invocations)."""
    config = _load_config()
    orchestrator = LaunchOrchestrator.from_config(config)
    try:
        killed = orchestrator.controller.terminate()
    except SignerError as e:
        _fail(e)

    typer.echo("Signer daemon stopped." if killed else "No signer daemon running.")


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
