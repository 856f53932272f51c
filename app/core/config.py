"""
Polypuff server configuration.

Settings are read once when the app is built and injected into the proxy
layer. Credentials are optional at startup; a route that needs a missing
credential answers 500 at request time.

Configuration sources:
  - THIRDWEB_API_URL (default https://api.thirdweb.com)
  - THIRDWEB_SECRET_KEY / THIRDWEB_CLIENT_ID
  - SIDESHIFT_API_BASE_URL (default https://sideshift.ai/api/v2)
  - SIDESHIFT_SECRET
  - SIDESHIFT_AFFILIATE_ID, falling back to SIDESHIFT_AFFILIATE
  - POLYPUFF_UPSTREAM_TIMEOUT (seconds, default 30)
  - POLYPUFF_CORS_ORIGINS (comma separated, default *)
  - POLYPUFF_LOG_LEVEL (default INFO), POLYPUFF_LOG_JSON (default false)
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from app.core.errors import ConfigurationError

DEFAULT_THIRDWEB_API_URL = "https://api.thirdweb.com"
DEFAULT_SIDESHIFT_API_BASE_URL = "https://sideshift.ai/api/v2"


@dataclass(frozen=True)
class Settings:
    """Server-side settings for the proxy routes."""

    thirdweb_api_url: str = DEFAULT_THIRDWEB_API_URL
    thirdweb_client_id: Optional[str] = None
    thirdweb_secret_key: Optional[str] = None
    sideshift_api_base_url: str = DEFAULT_SIDESHIFT_API_BASE_URL
    sideshift_secret: Optional[str] = None
    sideshift_affiliate_id: Optional[str] = None
    upstream_timeout: float = 30.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def chat_configured(self) -> bool:
        return bool(self.thirdweb_secret_key or self.thirdweb_client_id)

    @property
    def sideshift_configured(self) -> bool:
        return bool(self.sideshift_secret)

    def chat_auth_headers(self) -> dict[str, str]:
        """Headers authenticating against the chat API; secret key wins."""
        if self.thirdweb_secret_key:
            return {"x-secret-key": self.thirdweb_secret_key}
        if self.thirdweb_client_id:
            return {"x-client-id": self.thirdweb_client_id}
        raise ConfigurationError(
            "Missing thirdweb credentials. Please set THIRDWEB_CLIENT_ID or "
            "THIRDWEB_SECRET_KEY environment variable."
        )

    def sideshift_secret_headers(self, required: bool) -> dict[str, str]:
        if self.sideshift_secret:
            return {"x-sideshift-secret": self.sideshift_secret}
        if required:
            raise ConfigurationError(
                "Missing SideShift secret. Set the SIDESHIFT_SECRET environment variable."
            )
        return {}


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    try:
        raw = _env(name)
        if raw:
            return float(raw)
    except (ValueError, TypeError):
        pass
    return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = _env(name)
    if not raw:
        return list(default)
    items = [item.strip() for item in raw.split(",")]
    return [item for item in items if item] or list(default)


def load_settings() -> Settings:
    """Build Settings from the process environment."""
    return Settings(
        thirdweb_api_url=(_env("THIRDWEB_API_URL") or DEFAULT_THIRDWEB_API_URL).rstrip("/"),
        thirdweb_client_id=_env("THIRDWEB_CLIENT_ID"),
        thirdweb_secret_key=_env("THIRDWEB_SECRET_KEY"),
        sideshift_api_base_url=(
            _env("SIDESHIFT_API_BASE_URL") or DEFAULT_SIDESHIFT_API_BASE_URL
        ).rstrip("/"),
        sideshift_secret=_env("SIDESHIFT_SECRET"),
        sideshift_affiliate_id=_env("SIDESHIFT_AFFILIATE_ID") or _env("SIDESHIFT_AFFILIATE"),
        upstream_timeout=_env_float("POLYPUFF_UPSTREAM_TIMEOUT", 30.0),
        cors_origins=_env_list("POLYPUFF_CORS_ORIGINS", ["*"]),
        log_level=_env("POLYPUFF_LOG_LEVEL") or "INFO",
        log_json=_env_bool("POLYPUFF_LOG_JSON"),
    )
