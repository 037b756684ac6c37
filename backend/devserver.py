#!/usr/bin/env python3
"""
Server launcher that works from any working directory.

This is the container entrypoint (`python -m backend.devserver`). Set
RELOAD=true locally to pick up handler edits without restarting.
"""
import sys
from pathlib import Path

# Add repo root to sys.path if not already present
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from backend.app.config.settings import settings


def main() -> None:
    import uvicorn

    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
        # Auto-reload is a local editing aid; never in production.
        reload=settings.reload and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
