"""Proxy error taxonomy and the FastAPI handlers that render it."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Base class for errors the proxy turns into a JSON response."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class RequestValidationFailed(ProxyError):
    """Malformed or missing request fields."""

    status_code = 400


class UpstreamApiError(ProxyError):
    """Non-2xx answer from a third-party API; keeps its status and payload."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(message, status_code=status_code, details=payload)


class TransportError(ProxyError):
    """Network failure while talking to an upstream."""

    status_code = 500


class ConfigurationError(ProxyError):
    """A credential the route needs is not configured."""

    status_code = 500


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProxyError, _proxy_error_handler)  # type: ignore[arg-type]
