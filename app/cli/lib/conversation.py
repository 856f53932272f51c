"""Conversation reducer.

Pure functions over ``ConversationState``: every step returns a new state and
never mutates its input. One user submission opens a turn (``begin_turn``);
stream events are folded in with ``apply_event``; the turn is closed by a
``done``/``error`` event, by ``finish_stream`` when the stream ends, or by
``fail_turn`` when the transport breaks.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from app.schemas.conversation import (
    ConversationState,
    Message,
    SessionState,
    ThinkingState,
)
from app.schemas.stream_events import (
    ActionEvent,
    ContextEvent,
    DeltaEvent,
    DoneEvent,
    ErrorEvent,
    IgnoredEvent,
    ImageEvent,
    InitEvent,
    PresenceEvent,
    StreamEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_ERROR_TEXT = "An error occurred"
TRANSPORT_FAILURE_TEXT = (
    "Sorry, I encountered an error while processing your request. Please try again."
)

_IDLE = ThinkingState()


class TurnInProgressError(RuntimeError):
    """A prompt was submitted while the previous turn is still streaming."""


def format_error_notice(message: Optional[str]) -> str:
    return f"\n\n❌ Error: {message or DEFAULT_ERROR_TEXT}"


def begin_turn(state: ConversationState, prompt: str) -> ConversationState:
    """Append the user message and an empty assistant message in ``sending``."""
    text = prompt.strip()
    if not text:
        raise ValueError("prompt must not be empty")
    if state.in_flight:
        raise TurnInProgressError("a response is still streaming")

    user_message = Message(role="user", content=text, status="sent")
    assistant_message = Message(role="assistant", status="sending")
    return state.model_copy(
        update={
            "messages": state.messages + (user_message, assistant_message),
            "active_message_id": assistant_message.id,
            "thinking": _IDLE,
        }
    )


def _replace_active(state: ConversationState, message: Message) -> tuple[Message, ...]:
    return tuple(message if m.id == message.id else m for m in state.messages)


def _update_active(state: ConversationState, **changes) -> ConversationState:
    message = state.active_message
    if message is None:
        return state
    updated = message.model_copy(update=changes)
    return state.model_copy(update={"messages": _replace_active(state, updated)})


def apply_event(state: ConversationState, event: StreamEvent) -> ConversationState:
    """Fold one stream event into the conversation."""
    if isinstance(event, InitEvent):
        if event.session_id:
            return state.model_copy(update={"session": SessionState(session_id=event.session_id)})
        return state

    if isinstance(event, PresenceEvent):
        if event.label is None:
            return state
        return state.model_copy(update={"thinking": ThinkingState(active=True, label=event.label)})

    if isinstance(event, (ContextEvent, IgnoredEvent)):
        return state

    # Everything below carries content for the assistant message.
    cleared = state.model_copy(update={"thinking": _IDLE})
    message = cleared.active_message
    if message is None or message.is_terminal:
        logger.debug("dropping %s: no open assistant message", type(event).__name__)
        return cleared

    if isinstance(event, DeltaEvent):
        if not event.v:
            return cleared
        return _update_active(cleared, content=message.content + event.v)

    if isinstance(event, ActionEvent):
        return _update_active(cleared, actions=message.actions + (event.action,))

    if isinstance(event, ImageEvent):
        return _update_active(cleared, images=message.images + (event.image,))

    if isinstance(event, ErrorEvent):
        return _update_active(
            cleared,
            content=message.content + format_error_notice(event.message),
            status="error",
        )

    if isinstance(event, DoneEvent):
        return _update_active(cleared, status="sent")

    logger.debug("unhandled stream event %r", event)
    return cleared


def fail_turn(state: ConversationState, reason: Optional[str] = None) -> ConversationState:
    """Close the open turn as failed (transport error or truncated stream)."""
    cleared = state.model_copy(update={"thinking": _IDLE})
    message = cleared.active_message
    if message is None or message.is_terminal:
        return cleared
    return _update_active(
        cleared,
        content=message.content + format_error_notice(reason or TRANSPORT_FAILURE_TEXT),
        status="error",
    )


def finish_stream(state: ConversationState) -> ConversationState:
    """Called when the stream closes; a turn without done/error is a failure."""
    message = state.active_message
    if message is not None and not message.is_terminal:
        logger.warning("chat stream closed before a terminal event")
        return fail_turn(state)
    return state.model_copy(update={"thinking": _IDLE})


def fold_events(state: ConversationState, events: Iterable[StreamEvent]) -> ConversationState:
    """Apply a complete event log and close the stream."""
    for event in events:
        state = apply_event(state, event)
    return finish_stream(state)
