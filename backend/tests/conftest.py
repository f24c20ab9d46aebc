"""
Shared test fixtures for pytest.

This module provides reusable fixtures for the credit ledger, the component
catalog, a scripted LLM gateway, and authenticated HTTP clients.
"""
import os
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
os.environ["CLERK_JWT_KEY"] = "test-clerk-secret-for-unit-tests-only"
os.environ["CLERK_JWT_ALGORITHM"] = "HS256"
os.environ["CREDITS_DB_PATH"] = "test_user_credits.db"

from infraai.config import get_settings, Settings
from infraai.database import CreditLedger
from infraai.dependencies import get_catalog_components, get_gateway, get_ledger
from infraai.main import app
from infraai.services.catalog import load_catalog

from helpers import make_token, ok


@pytest.fixture
def test_settings() -> Settings:
    """Override settings for tests."""
    return get_settings()


@pytest.fixture
def catalog():
    """The bundled component catalog."""
    return load_catalog()


@pytest.fixture
async def ledger(tmp_path) -> CreditLedger:
    """Credit ledger on a fresh SQLite file."""
    ledger = CreditLedger(tmp_path / "credits.db")
    await ledger.init_db()
    return ledger


@pytest.fixture
def mock_gateway():
    """LLM gateway whose generate() replies are scripted per test."""
    gateway = MagicMock()
    gateway.generate = AsyncMock(return_value=ok("GENERAL_CHAT"))
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def auth_headers() -> dict:
    """Authorization header for the default test user."""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
async def api_client(ledger, mock_gateway, catalog):
    """Async client against the app with ledger, gateway and catalog injected."""
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.dependency_overrides[get_catalog_components] = lambda: catalog
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client(catalog):
    """FastAPI test client for endpoints that need no ledger."""
    app.dependency_overrides[get_catalog_components] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()
