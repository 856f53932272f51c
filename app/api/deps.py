import httpx
from fastapi import Depends, Request

from app.core.config import Settings
from app.services.sideshift import SideshiftClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_sideshift_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> SideshiftClient:
    return SideshiftClient(http, settings)
