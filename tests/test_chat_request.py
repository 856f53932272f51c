"""Tests for the outbound /api/chat request body."""

from app.cli.lib.chat_request import build_chat_request
from app.schemas.conversation import SessionState


def test_full_context() -> None:
    body = build_chat_request(
        "  swap 10 POL to USDC ",
        SessionState(session_id="s1"),
        wallet_address="0xabc",
        chain_id=137,
    )
    assert body == {
        "messages": [{"role": "user", "content": "swap 10 POL to USDC"}],
        "context": {"session_id": "s1", "from": "0xabc", "chain_ids": [137]},
    }


def test_no_wallet_and_no_chain_are_omitted() -> None:
    body = build_chat_request("hi", SessionState())
    assert body["context"] == {"session_id": None}
    assert "from" not in body["context"]
    assert "chain_ids" not in body["context"]


def test_chain_without_wallet() -> None:
    body = build_chat_request("hi", SessionState(), chain_id=1)
    assert body["context"] == {"session_id": None, "chain_ids": [1]}


def test_pure_function() -> None:
    session = SessionState(session_id="s1")
    assert build_chat_request("hi", session, "0x1", 137) == build_chat_request("hi", session, "0x1", 137)
