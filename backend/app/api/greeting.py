from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from backend.app.config.settings import settings

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def greeting() -> str:
    """Return the configured greeting as plain text."""
    return settings.greeting
