import json
from typing import Any

from fastapi import Request

from app.core.errors import RequestValidationFailed

INVALID_JSON_BODY = "Invalid JSON body."


async def read_json_object(request: Request) -> dict[str, Any]:
    """Body as a JSON object, or 400 ``Invalid JSON body.``"""
    raw = await request.body()
    try:
        body = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        raise RequestValidationFailed(INVALID_JSON_BODY) from e
    if not isinstance(body, dict):
        raise RequestValidationFailed(INVALID_JSON_BODY)
    return body


def require_string(body: dict[str, Any], field: str) -> str:
    value = body.get(field)
    if not value or not isinstance(value, str):
        raise RequestValidationFailed(f"Missing or invalid `{field}`.")
    return value
