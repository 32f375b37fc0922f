"""
Shared test fixtures: fake Square client, orchestrator, test client.
"""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Keep the import-time app away from any real credentials
os.environ["SQUARE_ACCESS_TOKEN"] = "test-token"
os.environ["SQUARE_LOCATION_ID"] = "LOC-TEST"
os.environ["OWNER_EMAIL"] = ""
os.environ["FORMSPREE_OWNER_ENDPOINT"] = ""

from catering_quotes.config import Settings
from catering_quotes.main import create_app
from catering_quotes.quote_orchestrator import QuoteOrchestrator
from catering_quotes.routers.quotes import get_orchestrator
from tests.fakes import FakeSquareClient


@pytest.fixture
def test_settings():
    return Settings(
        SQUARE_ACCESS_TOKEN="test-token",
        SQUARE_LOCATION_ID="LOC-TEST",
        OWNER_EMAIL="",
        FORMSPREE_OWNER_ENDPOINT="",
    )


@pytest.fixture
def fake_square():
    return FakeSquareClient()


@pytest.fixture
def orchestrator(fake_square):
    return QuoteOrchestrator(
        client=fake_square,
        location_id="LOC-TEST",
        today=lambda: date(2026, 3, 1),
        new_idempotency_key=lambda: "idem-key-1",
    )


@pytest.fixture
def client(test_settings, orchestrator):
    """FastAPI test client wired to the fake Square client."""
    app = create_app(test_settings, orchestrator=orchestrator)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return TestClient(app)
