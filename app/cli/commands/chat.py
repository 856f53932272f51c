"""Chat command - streaming conversation with the Polypuff assistant."""

import json
import logging
from typing import Optional

import typer

from app.cli import _globals
from app.cli.lib.chat_renderer import ChatRenderer
from app.cli.lib.chat_session import ChatSession
from app.cli.lib.conversation import TurnInProgressError
from app.cli.lib.safe_output import emoji, safe_print
from app.cli.lib.wallet_actions import prepare_transaction
from app.schemas.conversation import Message

logger = logging.getLogger(__name__)


def _message_to_dict(message: Message) -> dict:
    return message.model_dump(mode="json", by_alias=True)


def _unsigned_transactions(message: Message) -> list[dict]:
    """Transactions the wallet would be asked to sign, keyed by request id."""
    prepared = []
    for action in message.actions:
        if action.type == "monitor_transaction":
            continue
        try:
            tx = prepare_transaction(action)
        except ValueError as e:
            logger.warning("cannot prepare %s: %s", action.request_id, e)
            continue
        prepared.append({"request_id": action.request_id, **tx.model_dump()})
    return prepared


def run_turn(session: ChatSession, prompt: str, renderer: Optional[ChatRenderer] = None) -> Message:
    """Send one prompt; stream to the terminal unless ``renderer`` is None."""
    if renderer is None:
        return session.send(prompt)

    renderer.start_turn()
    message = session.send(prompt, on_update=renderer.on_update)
    renderer.finish_turn(message)
    return message


def _print_repl_help() -> None:
    safe_print("\n[Chat help]\n")
    safe_print("  - Type a message and press Enter to send it")
    safe_print("  - /session  show the current backend session id")
    safe_print("  - /help     show this help")
    safe_print("  - /exit, quit, Ctrl+D  leave chat mode\n")


def _print_banner(session: ChatSession) -> None:
    safe_print("=" * 60)
    safe_print("Polypuff - wallet assistant for Polygon")
    safe_print("=" * 60)
    wallet = session.wallet_address or "not connected"
    chain = session.chain_id or "unknown"
    safe_print(f"{emoji('👛', '[WALLET]')} wallet: {wallet}  chain: {chain}")
    safe_print("Ask about your wallet, transactions, or anything on Polygon.")
    safe_print("Type /help for commands.\n")


def repl(session: ChatSession) -> None:
    renderer = ChatRenderer()
    _print_banner(session)

    while True:
        try:
            raw_input = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            safe_print("\n\n[EXIT] Left chat mode")
            break

        if not raw_input:
            continue

        command = raw_input.lower()
        if command in {"/exit", "quit", "exit"}:
            safe_print("\n[EXIT] Left chat mode")
            break
        if command == "/help":
            _print_repl_help()
            continue
        if command == "/session":
            safe_print(f"session: {session.session_id or '(none yet)'}")
            continue

        safe_print("")
        try:
            run_turn(session, raw_input, renderer)
        except TurnInProgressError:
            renderer.render_error("a response is still streaming; wait for it to finish")
        safe_print("")


def chat(
    message: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="Send a single message and exit instead of starting the interactive chat.",
    ),
) -> None:
    """
    Chat with the Polypuff assistant.

    Replies stream live; actions that need a wallet signature are listed after
    each reply.
    """
    config = _globals.get_global_config()
    client = _globals.make_client(config)
    session = ChatSession(
        client,
        wallet_address=config.wallet_address,
        chain_id=config.chain_id,
    )

    try:
        if message is None:
            repl(session)
            return

        if config.output_format == "json":
            result = run_turn(session, message)
            safe_print(
                json.dumps(
                    {
                        "session_id": session.session_id,
                        "message": _message_to_dict(result),
                        "transactions": _unsigned_transactions(result),
                    },
                    ensure_ascii=False,
                    indent=2,
                )
            )
        else:
            result = run_turn(session, message, ChatRenderer())

        if result.status == "error":
            raise typer.Exit(1)
    finally:
        client.close()
