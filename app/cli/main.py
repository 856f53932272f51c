"""
Polypuff CLI Main Entry Point

Chat with the Polypuff wallet assistant, run copilot presets and drive
SideShift swaps through the proxy server.
"""

import logging
import sys

import typer

from app.core.env_loader import load_project_env

# .env must be applied before typer reads envvar defaults
load_project_env()

from app.cli._globals import set_global_config
from app.cli.commands import chat, copilot, sideshift
from app.cli.config import get_config


def config_callback(
    api_base: str = typer.Option(
        None,
        "--api-base",
        help="Proxy server base URL (e.g., http://127.0.0.1:8000). Overrides POLYPUFF_API_BASE env var.",
        envvar="POLYPUFF_API_BASE",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print machine-readable JSON instead of the streamed transcript.",
    ),
    timeout: int = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds. Overrides POLYPUFF_CLI_TIMEOUT env var.",
        envvar="POLYPUFF_CLI_TIMEOUT",
    ),
    wallet: str = typer.Option(
        None,
        "--wallet",
        help="Connected wallet address sent as chat context. Overrides POLYPUFF_WALLET_ADDRESS.",
        envvar="POLYPUFF_WALLET_ADDRESS",
    ),
    chain_id: int = typer.Option(
        None,
        "--chain-id",
        help="Active chain id sent as chat context (137 for Polygon). Overrides POLYPUFF_CHAIN_ID.",
        envvar="POLYPUFF_CHAIN_ID",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP and stream details."),
) -> None:
    """Resolve global options once; every command reads them back through _globals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    output_format = "json" if json_output else None
    config = get_config(
        api_base=api_base,
        timeout=timeout,
        output_format=output_format,  # type: ignore
        wallet_address=wallet,
        chain_id=chain_id,
    )
    set_global_config(config)


app = typer.Typer(
    name="polypuff",
    help="Polypuff: chat-driven wallet assistant for Polygon",
    no_args_is_help=True,
    callback=config_callback,
)

# commands
app.command()(chat.chat)
app.command()(copilot.copilot)
app.add_typer(sideshift.app, name="sideshift")


def main() -> None:
    """Console-script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        print("\n[ABORTED] Aborted by user.", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"\n[ERROR] Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
