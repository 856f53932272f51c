"""Opens the streaming call to the thirdweb AI chat endpoint."""

import logging
from typing import Any

import httpx

from app.core.config import Settings
from app.core.errors import TransportError, UpstreamApiError

logger = logging.getLogger(__name__)


async def open_chat_stream(
    http: httpx.AsyncClient,
    settings: Settings,
    messages: list[Any],
    context: dict[str, Any],
) -> httpx.Response:
    """
    Send the chat request with ``stream: true`` and return the open response.

    The caller owns the returned response and must close it. On a non-2xx
    answer the body is read, the response closed and UpstreamApiError raised.
    """
    headers = {"Content-Type": "application/json", **settings.chat_auth_headers()}
    request = http.build_request(
        "POST",
        f"{settings.thirdweb_api_url}/ai/chat",
        json={"messages": messages, "stream": True, "context": context},
        headers=headers,
        # the stream stays open while the assistant works
        timeout=httpx.Timeout(settings.upstream_timeout, read=None),
    )

    try:
        response = await http.send(request, stream=True)
    except httpx.HTTPError as e:
        logger.error("chat upstream unreachable: %s", e)
        raise TransportError("Internal server error") from e

    if response.is_error:
        try:
            error_text = (await response.aread()).decode("utf-8", errors="replace")
        finally:
            await response.aclose()
        logger.error("Thirdweb API error: %s %s", response.status_code, error_text[:500])
        raise UpstreamApiError(
            response.status_code,
            f"Thirdweb API error: {response.status_code} {response.reason_phrase}".rstrip(),
        )

    return response
