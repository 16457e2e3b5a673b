from datetime import datetime, timezone

from fastapi import APIRouter

from querypilot.app.core.settings import settings

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.APP_ENV,
    }
