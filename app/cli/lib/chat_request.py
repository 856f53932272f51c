from __future__ import annotations

from typing import Any, Optional

from app.schemas.conversation import SessionState


def build_chat_request(
    prompt: str,
    session: SessionState,
    wallet_address: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> dict[str, Any]:
    """Body for POST /api/chat.

    Only the latest user message travels; the backend keeps the history under
    ``session_id``. ``from`` and ``chain_ids`` are left out entirely when
    unknown.
    """
    context: dict[str, Any] = {"session_id": session.session_id}
    if wallet_address:
        context["from"] = wallet_address
    if chain_id:
        context["chain_ids"] = [chain_id]

    return {
        "messages": [{"role": "user", "content": prompt.strip()}],
        "context": context,
    }
