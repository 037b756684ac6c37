from fastapi import APIRouter

from backend.app.config.settings import settings

router = APIRouter()


@router.get("/health")
def health():
    """Constant-time health check used by the liveness and readiness probes."""
    return {"status": "healthy"}


@router.get("/version")
async def version():
    return {"version": settings.app_version}
