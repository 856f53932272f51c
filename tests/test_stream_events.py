"""Unit tests for decoding raw stream events into typed variants."""

import pytest

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
    RawEvent,
    StreamParseError,
    parse_stream_event,
)


class TestKnownEvents:
    def test_init(self) -> None:
        event = parse_stream_event(RawEvent("init", '{"session_id": "s1", "request_id": "r1"}'))
        assert event == InitEvent(session_id="s1")

    def test_init_without_session(self) -> None:
        assert parse_stream_event(RawEvent("init", '{"request_id": "r1"}')) == InitEvent(None)

    def test_presence(self) -> None:
        event = parse_stream_event(RawEvent("presence", '{"data": "Checking balances"}'))
        assert event == PresenceEvent(label="Checking balances")

    def test_presence_non_string_data(self) -> None:
        event = parse_stream_event(RawEvent("presence", '{"data": {"step": 1}}'))
        assert event == PresenceEvent(label=None)

    def test_delta(self) -> None:
        assert parse_stream_event(RawEvent("delta", '{"v": "Hel"}')) == DeltaEvent(v="Hel")

    def test_delta_without_v(self) -> None:
        assert parse_stream_event(RawEvent("delta", "{}")) == DeltaEvent(v=None)

    def test_action(self) -> None:
        raw = RawEvent(
            "action",
            '{"type": "sign_swap", "data": {"intent": {}, "transaction": {}},'
            ' "request_id": "r1", "session_id": "s1"}',
        )
        event = parse_stream_event(raw)
        assert isinstance(event, ActionEvent)
        assert event.action.type == "sign_swap"
        assert event.action.request_id == "r1"
        assert event.action.session_id == "s1"
        assert event.action.payload == {"intent": {}, "transaction": {}}

    def test_image(self) -> None:
        event = parse_stream_event(
            RawEvent("image", '{"url": "https://x/y.png", "width": 512, "height": 256}')
        )
        assert isinstance(event, ImageEvent)
        assert (event.image.url, event.image.width, event.image.height) == ("https://x/y.png", 512, 256)

    def test_context(self) -> None:
        event = parse_stream_event(RawEvent("context", '{"chain_ids": [137]}'))
        assert event == ContextEvent(payload={"chain_ids": [137]})

    def test_error(self) -> None:
        assert parse_stream_event(RawEvent("error", '{"data": "quota"}')) == ErrorEvent("quota")

    def test_error_without_data(self) -> None:
        assert parse_stream_event(RawEvent("error", "{}")) == ErrorEvent(None)

    def test_done(self) -> None:
        assert parse_stream_event(RawEvent("done", "{}")) == DoneEvent()

    def test_done_without_data(self) -> None:
        assert parse_stream_event(RawEvent("done", None)) == DoneEvent()


class TestUnknownEvents:
    def test_unknown_name_ignored(self) -> None:
        assert parse_stream_event(RawEvent("tool_call", '{"x": 1}')) == IgnoredEvent("tool_call")

    def test_unknown_name_with_garbage_payload_ignored(self) -> None:
        assert parse_stream_event(RawEvent("future", "not json")) == IgnoredEvent("future")

    def test_missing_name_ignored(self) -> None:
        assert parse_stream_event(RawEvent(None, '{"v": "x"}')) == IgnoredEvent("")


class TestMalformedPayloads:
    def test_invalid_json(self) -> None:
        raw = RawEvent("delta", '{"v": ')
        with pytest.raises(StreamParseError) as exc_info:
            parse_stream_event(raw)
        assert exc_info.value.raw is raw

    def test_non_object_payload(self) -> None:
        with pytest.raises(StreamParseError):
            parse_stream_event(RawEvent("delta", '["v"]'))

    def test_action_missing_fields(self) -> None:
        with pytest.raises(StreamParseError):
            parse_stream_event(RawEvent("action", '{"type": "sign_transaction", "data": {}}'))

    def test_action_unknown_type(self) -> None:
        with pytest.raises(StreamParseError):
            parse_stream_event(
                RawEvent(
                    "action",
                    '{"type": "burn_tokens", "data": {}, "request_id": "r", "session_id": "s"}',
                )
            )

    def test_image_missing_dimensions(self) -> None:
        with pytest.raises(StreamParseError):
            parse_stream_event(RawEvent("image", '{"url": "https://x/y.png"}'))
