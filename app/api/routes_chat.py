import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.api.deps import get_http_client, get_settings
from app.api.request_body import read_json_object
from app.core.config import Settings
from app.core.errors import RequestValidationFailed
from app.services.chat_upstream import open_chat_stream

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post("/chat")
async def chat_proxy(
    request: Request,
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    """Forward a chat turn upstream and pass the event stream through untouched."""
    body = await read_json_object(request)

    messages = body.get("messages")
    if not isinstance(messages, list):
        raise RequestValidationFailed("Missing or invalid `messages`.")
    context = body.get("context")
    if not isinstance(context, dict):
        context = {}

    upstream = await open_chat_stream(http, settings, messages, context)
    logger.info("chat stream opened (session=%s)", context.get("session_id") or "-")

    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        headers=_STREAM_HEADERS,
        background=BackgroundTask(upstream.aclose),
    )
