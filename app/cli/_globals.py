from typing import Optional

from app.cli.client import APIClient
from app.cli.config import CLIConfig, get_config

_config: Optional[CLIConfig] = None


def set_global_config(config: CLIConfig) -> None:
    global _config
    _config = config


def get_global_config() -> CLIConfig:
    global _config
    if _config is None:
        _config = get_config()
    return _config


def make_client(config: Optional[CLIConfig] = None) -> APIClient:
    config = config or get_global_config()
    return APIClient(
        base_url=config.api_base,
        timeout=config.timeout,
        retry_times=config.retry_times,
    )
