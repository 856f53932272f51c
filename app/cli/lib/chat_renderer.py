"""Terminal renderer for a streaming chat turn.

Text deltas are printed as they arrive; the thinking label is shown on its own
line; actions and images are listed once the turn is closed.
"""

from __future__ import annotations

from app.cli.lib.safe_output import emoji, safe_print
from app.cli.lib.wallet_actions import describe_action
from app.schemas.conversation import ConversationState, Message
from app.schemas.stream_events import DeltaEvent, PresenceEvent, StreamEvent


class ChatRenderer:
    """Render chat stream updates with a stable block structure."""

    _ACTION_MARK = {
        "sign_transaction": emoji("✍️", "[SIGN]"),
        "sign_swap": emoji("🔁", "[SWAP]"),
        "monitor_transaction": emoji("👀", "[MONITOR]"),
    }

    def __init__(self) -> None:
        self._printed = 0
        self._thinking_label: str | None = None

    def start_turn(self) -> None:
        self._printed = 0
        self._thinking_label = None
        safe_print("Polypuff: ", end="", flush=True)

    def on_update(self, state: ConversationState, event: StreamEvent) -> None:
        """Callback for ChatSession.send."""
        if isinstance(event, PresenceEvent) and state.thinking.active:
            if state.thinking.label != self._thinking_label:
                self._thinking_label = state.thinking.label
                self.render_thinking(state.thinking.label or "")
            return

        message = state.active_message
        if message is None:
            return
        if isinstance(event, DeltaEvent) or len(message.content) > self._printed:
            self.render_token(message.content[self._printed:])
            self._printed = len(message.content)

    def render_token(self, content: str) -> None:
        """Render incremental text without newline."""
        if content:
            safe_print(content, end="", flush=True)

    def render_thinking(self, label: str) -> None:
        safe_print(f"\n{emoji('💭', '[THINKING]')} {label}", flush=True)

    def finish_turn(self, message: Message) -> None:
        """Print whatever the live stream did not: trailing text, actions, images."""
        if len(message.content) > self._printed:
            self.render_token(message.content[self._printed:])
            self._printed = len(message.content)
        safe_print("")
        self.render_extras(message)

    def render_extras(self, message: Message) -> None:
        if message.actions:
            safe_print("\n" + "-" * 60)
            safe_print("[Actions]")
            for index, action in enumerate(message.actions, start=1):
                mark = self._ACTION_MARK.get(action.type, "-")
                safe_print(f"  {index}. {mark} {describe_action(action)}")
                safe_print(f"     request: {action.request_id}")
            safe_print("-" * 60)

        if message.images:
            safe_print("\n[Images]")
            for image in message.images:
                safe_print(f"  - {image.url} ({image.width}x{image.height})")

    def render_error(self, error_msg: str) -> None:
        """Render error block."""
        safe_print(f"\n{emoji('❌', '[ERROR]')} Error: {error_msg}")
