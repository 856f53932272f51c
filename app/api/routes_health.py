from fastapi import APIRouter, Depends

from app.api.deps import get_settings
from app.core.config import Settings

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz(settings: Settings = Depends(get_settings)) -> dict[str, bool]:
    return {
        "ok": True,
        "chat_configured": settings.chat_configured,
        "sideshift_configured": settings.sideshift_configured,
    }
