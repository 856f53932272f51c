from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ActionType = Literal["sign_transaction", "sign_swap", "monitor_transaction"]
MessageRole = Literal["user", "assistant"]
MessageStatus = Literal["sending", "sent", "error"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"sent", "error"})

_last_id = 0


def next_message_id() -> str:
    """Millisecond clock id, bumped so two ids never collide or go backwards."""
    global _last_id
    candidate = time.time_ns() // 1_000_000
    _last_id = max(candidate, _last_id + 1)
    return str(_last_id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Action(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: ActionType
    payload: dict[str, Any] = Field(alias="data")
    request_id: str
    session_id: str


class ImageRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    width: int
    height: int


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=next_message_id)
    role: MessageRole
    content: str = ""
    actions: tuple[Action, ...] = ()
    images: tuple[ImageRef, ...] = ()
    status: MessageStatus = "sending"
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str | None = None


class ThinkingState(BaseModel):
    model_config = ConfigDict(frozen=True)

    active: bool = False
    label: str | None = None


class ConversationState(BaseModel):
    """Everything the chat view needs; replaced wholesale by each reducer step."""

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...] = ()
    session: SessionState = Field(default_factory=SessionState)
    thinking: ThinkingState = Field(default_factory=ThinkingState)
    active_message_id: str | None = None

    @property
    def active_message(self) -> Message | None:
        if self.active_message_id is None:
            return None
        for message in reversed(self.messages):
            if message.id == self.active_message_id:
                return message
        return None

    @property
    def in_flight(self) -> bool:
        message = self.active_message
        return message is not None and not message.is_terminal
