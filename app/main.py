from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.env_loader import load_project_env

load_project_env()

from app.api.routes_chat import router as chat_router
from app.api.routes_health import router as health_router
from app.api.routes_sideshift import router as sideshift_router
from app.core.config import Settings, load_settings
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the proxy app; ``transport`` replaces the network in tests."""
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # one pooled upstream client per process
        app.state.http_client = httpx.AsyncClient(
            transport=transport,
            timeout=settings.upstream_timeout,
        )
        try:
            yield
        finally:
            await app.state.http_client.aclose()

    app = FastAPI(title="Polypuff", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(sideshift_router)
    return app


app = create_app()
