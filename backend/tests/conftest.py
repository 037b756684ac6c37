import os

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app/settings
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "INFO"
os.environ.pop("GREETING", None)

from backend.app.main import app
from backend.app.config.settings import settings


@pytest.fixture
def client():
    original_greeting = settings.greeting
    try:
        with TestClient(app) as c:
            yield c
    finally:
        settings.greeting = original_greeting
