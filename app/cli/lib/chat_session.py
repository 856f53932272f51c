"""Drives one conversation against the /api/chat proxy."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from app.cli.client import APIClient, APIError
from app.cli.lib.chat_request import build_chat_request
from app.cli.lib.conversation import (
    TurnInProgressError,
    apply_event,
    begin_turn,
    fail_turn,
    finish_stream,
)
from app.schemas.conversation import ConversationState, Message
from app.schemas.stream_events import StreamEvent, StreamParseError, parse_stream_event

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"

UpdateCallback = Callable[[ConversationState, StreamEvent], None]


class ChatSession:
    """
    Owns the conversation state and the single in-flight turn.

    ``send`` blocks until the assistant turn is closed and returns the final
    assistant message; ``on_update`` sees the state after every applied event,
    which is where the CLI renders deltas as they arrive.
    """

    def __init__(
        self,
        client: APIClient,
        wallet_address: Optional[str] = None,
        chain_id: Optional[int] = None,
        path: str = CHAT_PATH,
    ):
        self.client = client
        self.wallet_address = wallet_address
        self.chain_id = chain_id
        self.path = path
        self.state = ConversationState()
        self._busy = False

    @property
    def session_id(self) -> Optional[str]:
        return self.state.session.session_id

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.state.messages

    @property
    def is_loading(self) -> bool:
        return self._busy

    def send(self, prompt: str, on_update: Optional[UpdateCallback] = None) -> Message:
        if self._busy:
            raise TurnInProgressError("a response is still streaming")

        # session id must be read before the new turn is opened
        body = build_chat_request(
            prompt,
            self.state.session,
            wallet_address=self.wallet_address,
            chain_id=self.chain_id,
        )
        self.state = begin_turn(self.state, prompt)
        self._busy = True
        try:
            self._consume(body, on_update)
        except BaseException:
            # the turn must close even when the caller's callback or the stream blows up
            self.state = fail_turn(self.state)
            raise
        finally:
            self._busy = False

        message = self.state.active_message
        assert message is not None
        return message

    def _consume(self, body: dict, on_update: Optional[UpdateCallback]) -> None:
        try:
            for raw in self.client.open_stream(self.path, body):
                try:
                    event = parse_stream_event(raw)
                except StreamParseError as e:
                    logger.warning("skipping stream event: %s", e)
                    continue
                self.state = apply_event(self.state, event)
                if on_update is not None:
                    on_update(self.state, event)
        except APIError as e:
            logger.error("chat stream failed: %s", e.message)
            self.state = fail_turn(self.state)
            return
        self.state = finish_stream(self.state)
