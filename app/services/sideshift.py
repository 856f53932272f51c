"""Thin async client for the SideShift v2 REST API."""

import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from app.core.config import Settings
from app.core.errors import TransportError, UpstreamApiError

logger = logging.getLogger(__name__)


def _error_message(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
        nested = payload.get("error")
        if isinstance(nested, dict) and isinstance(nested.get("message"), str):
            return nested["message"]
        if isinstance(nested, str) and nested:
            return nested
    return json.dumps(payload, ensure_ascii=False)


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def _parse_response(response: httpx.Response) -> Any:
    if response.is_error:
        if _is_json(response):
            try:
                payload: Any = response.json()
            except (json.JSONDecodeError, ValueError):
                payload = response.text
        else:
            payload = response.text
        raise UpstreamApiError(response.status_code, _error_message(payload), payload)

    if not _is_json(response):
        return response.text
    return response.json()


class SideshiftClient:
    """
    Forwards calls to SideShift with the server-held secret and affiliate id.

    Raises:
        ConfigurationError: a secret-only call without SIDESHIFT_SECRET
        UpstreamApiError: SideShift answered non-2xx
        TransportError: SideShift could not be reached
    """

    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.settings = settings

    @property
    def affiliate_id(self) -> Optional[str]:
        return self.settings.sideshift_affiliate_id

    def _url(self, path: str) -> str:
        return f"{self.settings.sideshift_api_base_url}/{path.lstrip('/')}"

    async def fetch(
        self,
        path: str,
        method: str = "GET",
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        requires_secret: bool = False,
    ) -> Any:
        headers = self.settings.sideshift_secret_headers(required=requires_secret)
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}

        try:
            response = await self.http.request(
                method,
                self._url(path),
                params=query or None,
                json=body,
                headers=headers,
                timeout=self.settings.upstream_timeout,
            )
        except httpx.HTTPError as e:
            logger.error("SideShift %s %s unreachable: %s", method, path, e)
            raise TransportError(f"Unable to reach SideShift: {type(e).__name__}") from e

        if response.is_error:
            logger.warning("SideShift %s %s -> HTTP %s", method, path, response.status_code)
        return _parse_response(response)

    async def get_coins(self) -> Any:
        return await self.fetch("coins")

    async def get_pairs(self, deposit_coin: Optional[str], settle_coin: Optional[str]) -> Any:
        return await self.fetch(
            "pairs", params={"depositCoin": deposit_coin, "settleCoin": settle_coin}
        )

    async def request_quote(self, payload: dict[str, Any]) -> Any:
        return await self.fetch("quotes", method="POST", body=payload, requires_secret=True)

    async def create_fixed_shift(self, payload: dict[str, Any]) -> Any:
        return await self.fetch("shifts/fixed", method="POST", body=payload, requires_secret=True)

    async def get_shift(self, shift_id: str) -> Any:
        return await self.fetch(f"shifts/{quote(shift_id, safe='')}", requires_secret=True)
