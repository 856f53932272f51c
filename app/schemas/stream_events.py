"""
Typed view of the chat event stream.

Each server-sent event arrives as a ``RawEvent`` (name plus raw data string).
``parse_stream_event`` turns it into one of a closed set of variants; names
the client does not know become ``IgnoredEvent``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from app.schemas.conversation import Action, ImageRef


class StreamParseError(Exception):
    """A single event payload could not be decoded; the stream itself is fine."""

    def __init__(self, message: str, raw: "RawEvent"):
        self.raw = raw
        super().__init__(message)


@dataclass(frozen=True)
class RawEvent:
    event: Optional[str] = None
    data: Optional[str] = None


@dataclass(frozen=True)
class InitEvent:
    session_id: Optional[str]


@dataclass(frozen=True)
class PresenceEvent:
    label: Optional[str]


@dataclass(frozen=True)
class DeltaEvent:
    v: Optional[str]


@dataclass(frozen=True)
class ActionEvent:
    action: Action


@dataclass(frozen=True)
class ImageEvent:
    image: ImageRef


@dataclass(frozen=True)
class ContextEvent:
    payload: dict[str, Any]


@dataclass(frozen=True)
class ErrorEvent:
    message: Optional[str]


@dataclass(frozen=True)
class DoneEvent:
    pass


@dataclass(frozen=True)
class IgnoredEvent:
    name: str


StreamEvent = Union[
    InitEvent,
    PresenceEvent,
    DeltaEvent,
    ActionEvent,
    ImageEvent,
    ContextEvent,
    ErrorEvent,
    DoneEvent,
    IgnoredEvent,
]


def _decode_payload(raw: RawEvent) -> dict[str, Any]:
    if not raw.data or not raw.data.strip():
        return {}
    try:
        payload = json.loads(raw.data)
    except (json.JSONDecodeError, ValueError) as e:
        raise StreamParseError(f"invalid JSON in {raw.event!r} event: {e}", raw) from e
    if not isinstance(payload, dict):
        raise StreamParseError(
            f"{raw.event!r} event payload must be an object, got {type(payload).__name__}",
            raw,
        )
    return payload


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def parse_stream_event(raw: RawEvent) -> StreamEvent:
    """Decode one raw event.

    Raises:
        StreamParseError: the payload is not a JSON object, or an action/image
            payload is missing required fields.
    """
    name = raw.event or ""

    # Unknown names are never decoded, so a garbled payload on a future
    # event kind cannot break the stream.
    if name not in _KNOWN_EVENTS:
        return IgnoredEvent(name=name)

    payload = _decode_payload(raw)

    if name == "init":
        return InitEvent(session_id=_optional_str(payload.get("session_id")) or None)

    if name == "presence":
        label = payload.get("data")
        return PresenceEvent(label=label if isinstance(label, str) and label else None)

    if name == "delta":
        return DeltaEvent(v=_optional_str(payload.get("v")))

    if name == "action":
        try:
            action = Action.model_validate(
                {
                    "type": payload.get("type"),
                    "data": payload.get("data"),
                    "request_id": payload.get("request_id"),
                    "session_id": payload.get("session_id"),
                }
            )
        except ValidationError as e:
            raise StreamParseError(f"malformed action event: {e.error_count()} error(s)", raw) from e
        return ActionEvent(action=action)

    if name == "image":
        try:
            image = ImageRef.model_validate(
                {key: payload.get(key) for key in ("url", "width", "height")}
            )
        except ValidationError as e:
            raise StreamParseError(f"malformed image event: {e.error_count()} error(s)", raw) from e
        return ImageEvent(image=image)

    if name == "context":
        return ContextEvent(payload=payload)

    if name == "error":
        return ErrorEvent(message=_optional_str(payload.get("data")) or None)

    return DoneEvent()


_KNOWN_EVENTS = frozenset(
    {"init", "presence", "delta", "action", "image", "context", "error", "done"}
)
