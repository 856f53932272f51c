"""
Settings for the polypuff CLI.

A value given as a flag beats the environment, which beats the default:

  api_base        POLYPUFF_API_BASE           http://127.0.0.1:8000
  timeout         POLYPUFF_CLI_TIMEOUT        30 (seconds)
  output_format   POLYPUFF_CLI_OUTPUT_FORMAT  text (text|json)
  retry_times     POLYPUFF_CLI_RETRY_TIMES    3
  wallet_address  POLYPUFF_WALLET_ADDRESS     unset
  chain_id        POLYPUFF_CHAIN_ID           unset
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

DEFAULT_API_BASE = "http://127.0.0.1:8000"


@dataclass
class CLIConfig:
    """Resolved CLI settings."""

    api_base: str = DEFAULT_API_BASE
    timeout: int = 30  # seconds
    output_format: Literal["text", "json"] = "text"
    retry_times: int = 3
    wallet_address: Optional[str] = None
    chain_id: Optional[int] = None

    def to_dict(self) -> dict:
        """Plain dict for `--json` output and debugging."""
        return {
            "api_base": self.api_base,
            "timeout": self.timeout,
            "output_format": self.output_format,
            "retry_times": self.retry_times,
            "wallet_address": self.wallet_address,
            "chain_id": self.chain_id,
        }


def _env_int(name: str) -> Optional[int]:
    try:
        raw = os.getenv(name)
        if raw:
            return int(raw)
    except (ValueError, TypeError):
        pass
    return None


def get_api_base_from_env() -> str:
    return os.getenv("POLYPUFF_API_BASE") or DEFAULT_API_BASE


def get_timeout_from_env() -> int:
    return _env_int("POLYPUFF_CLI_TIMEOUT") or 30


def get_output_format_from_env() -> Literal["text", "json"]:
    output_format = os.getenv("POLYPUFF_CLI_OUTPUT_FORMAT", "text").lower()
    if output_format in ("text", "json"):
        return output_format  # type: ignore
    return "text"


def get_retry_times_from_env() -> int:
    return _env_int("POLYPUFF_CLI_RETRY_TIMES") or 3


def get_wallet_address_from_env() -> Optional[str]:
    return os.getenv("POLYPUFF_WALLET_ADDRESS") or None


def get_chain_id_from_env() -> Optional[int]:
    return _env_int("POLYPUFF_CHAIN_ID")


def get_config(
    api_base: Optional[str] = None,
    timeout: Optional[int] = None,
    output_format: Optional[Literal["text", "json"]] = None,
    retry_times: Optional[int] = None,
    wallet_address: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> CLIConfig:
    """Resolve each setting from the flag, then the environment, then the default."""
    return CLIConfig(
        api_base=api_base or get_api_base_from_env(),
        timeout=timeout or get_timeout_from_env(),
        output_format=output_format or get_output_format_from_env(),
        retry_times=retry_times or get_retry_times_from_env(),
        wallet_address=wallet_address or get_wallet_address_from_env(),
        chain_id=chain_id or get_chain_id_from_env(),
    )
