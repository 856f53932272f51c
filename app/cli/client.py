"""
Polypuff proxy client used by the CLI.

Buffered JSON calls with retry on connection failures, plus the streaming
POST that feeds the chat reducer.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from app.cli.lib.sse import iter_sse_events
from app.schemas.stream_events import RawEvent

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "x-api-key", "x-secret-key", "x-sideshift-secret"}


class APIError(Exception):
    """Anything that went wrong talking to the proxy."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_text: str = ""):
        self.message = message
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)

    def user_friendly_message(self) -> str:
        return self.message


class TransportError(APIError):
    """The request never produced a usable response."""


class NetworkError(TransportError):
    """Proxy unreachable: refused connection, DNS failure, reset."""

    def user_friendly_message(self) -> str:
        return (
            f"[ERROR] Could not connect to the Polypuff proxy: {self.message}\n"
            "Start it with `uvicorn app.main:app` or point --api-base at a running one."
        )


class TimeoutError(TransportError):
    def user_friendly_message(self) -> str:
        return (
            f"[TIMEOUT] The proxy did not answer in time: {self.message}\n"
            "Retry, or raise --timeout."
        )


class HTTPStatusError(TransportError):
    """The proxy answered 4xx/5xx."""

    def user_friendly_message(self) -> str:
        status = self.status_code or "?"
        detail = _error_field(self.response_text) or self.response_text[:200] or self.message
        return f"[HTTP {status}] {detail}"


class JSONParseError(APIError):
    def user_friendly_message(self) -> str:
        return f"[BAD RESPONSE] Expected JSON from the proxy, got: {self.response_text[:200]}"


def _error_field(response_text: str) -> Optional[str]:
    """Pull ``error`` out of a proxy JSON error body, if that is what it is."""
    try:
        body = json.loads(response_text)
    except (json.JSONDecodeError, ValueError, TypeError):
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


def _translate_httpx_error(error: httpx.HTTPError, what: str = "request") -> TransportError:
    if isinstance(error, httpx.ConnectTimeout):
        return NetworkError("connect timed out")
    if isinstance(error, httpx.TimeoutException):
        return TimeoutError(f"{what} timed out")
    if isinstance(error, (httpx.ConnectError, httpx.NetworkError)):
        return NetworkError(str(error) or type(error).__name__)
    return NetworkError(f"{type(error).__name__}: {error}")


def _status_error(response: httpx.Response) -> HTTPStatusError:
    text = response.text
    return HTTPStatusError(
        f"proxy returned HTTP {response.status_code}",
        status_code=response.status_code,
        response_text=text,
    )


class APIClient:
    """
    Sync httpx wrapper for the proxy routes.

    Connection failures on buffered calls are retried ``retry_times`` times;
    4xx/5xx answers and streams are not. ``transport`` replaces the network
    (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        timeout: float = 30.0,
        retry_times: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.retry_times = max(1, retry_times)

        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
            # ignore HTTP(S)_PROXY; the proxy server is usually local
            trust_env=False,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        if self._client:
            self._client.close()

    def _log_request(self, method: str, path: str, **kwargs):
        headers = kwargs.get("headers") or {}
        masked = {k: ("***" if k.lower() in _SENSITIVE_HEADERS else v) for k, v in headers.items()}
        logger.debug("%s %s%s headers=%s", method, self.base_url, path, masked)

    def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Buffered call returning the decoded JSON body.

        Raises:
            NetworkError, TimeoutError: after the last failed attempt
            HTTPStatusError: non-2xx answer
            JSONParseError: 2xx answer that is not JSON
        """
        self._log_request(method, path, **kwargs)

        for attempt in range(1, self.retry_times + 1):
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.warning(
                    "%s %s failed (attempt %d/%d): %s",
                    method, path, attempt, self.retry_times, type(e).__name__,
                )
                if attempt >= self.retry_times:
                    raise _translate_httpx_error(e) from e
                continue
            return self._process_response(response)

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    @contextmanager
    def stream(self, method: str, path: str, json: Optional[Dict[str, Any]] = None, **kwargs):
        """
        Yield an open 2xx httpx.Response.

        Error answers are read and raised as HTTPStatusError before the caller
        sees them.
        """
        self._log_request(method, path, **kwargs)

        # events can be minutes apart while the assistant works
        kwargs.setdefault(
            "timeout",
            httpx.Timeout(connect=self.timeout, read=None, write=self.timeout, pool=self.timeout),
        )

        try:
            with self._client.stream(method, path, json=json, **kwargs) as response:
                if response.status_code >= 400:
                    response.read()
                    raise _status_error(response)
                yield response
        except httpx.HTTPError as e:
            raise _translate_httpx_error(e, "stream") from e

    def open_stream(self, path: str, body: Dict[str, Any]) -> Iterator[RawEvent]:
        """
        POST ``body`` and yield server-sent events until the server closes.

        Single pass; abandoning the iterator closes the connection.
        """
        with self.stream("POST", path, json=body) as response:
            yield from iter_sse_events(response.iter_lines())

    def _process_response(self, response: httpx.Response) -> Any:
        if response.status_code >= 400:
            raise _status_error(response)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise JSONParseError(f"invalid JSON: {e}", response_text=response.text) from e
