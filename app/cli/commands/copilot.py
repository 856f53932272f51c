"""Copilot command - one-tap portfolio prompts."""

from typing import Optional

import typer

from app.cli import _globals
from app.cli.commands.chat import run_turn
from app.cli.lib.chat_renderer import ChatRenderer
from app.cli.lib.chat_session import ChatSession
from app.cli.lib.copilot_presets import COPILOT_ACTIONS, get_copilot_action
from app.cli.lib.safe_output import safe_print


def _print_presets() -> None:
    safe_print("[Copilot actions]")
    for action in COPILOT_ACTIONS:
        safe_print(f"  {action.id:<24} {action.label}")


def copilot(
    action_id: Optional[str] = typer.Argument(
        None, help="Preset to run, e.g. analyze-portfolio. Omit to list presets."
    ),
    list_only: bool = typer.Option(False, "--list", "-l", help="List the presets and exit."),
) -> None:
    """Run a copilot preset prompt through the chat assistant."""
    if list_only or action_id is None:
        _print_presets()
        return

    try:
        preset = get_copilot_action(action_id)
    except KeyError as e:
        safe_print(str(e.args[0]), err=True)
        raise typer.Exit(2)

    config = _globals.get_global_config()
    client = _globals.make_client(config)
    session = ChatSession(client, wallet_address=config.wallet_address, chain_id=config.chain_id)
    try:
        safe_print(f"> {preset.label}\n")
        message = run_turn(session, preset.prompt, ChatRenderer())
    finally:
        client.close()

    if message.status == "error":
        raise typer.Exit(1)
