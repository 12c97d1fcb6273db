"""Shared fixtures and mock API responses for store, chatbot and HTTP tests."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from cyclegarden.config import Settings
from cyclegarden.dependencies import get_chatbot, get_engine
from cyclegarden.engine.config_loader import GardenConfig, load_garden_config
from cyclegarden.engine.garden import GardenEngine
from cyclegarden.main import create_app
from cyclegarden.services.chatbot import GardenChatbot
from cyclegarden.services.store import JsonGardenStore

# Fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEST_DATE = date(2026, 2, 23)
TEST_NOW = datetime(2026, 2, 23, 9, 0, 0)
GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
)


def gemini_response(status_code: int = 200, **kwargs) -> httpx.Response:
    """Build an httpx response as returned by the Gemini endpoint."""
    return httpx.Response(status_code, request=httpx.Request("POST", GEMINI_URL), **kwargs)


# ---------------------------------------------------------------------------
# Config / storage
# ---------------------------------------------------------------------------


@pytest.fixture
def garden_config() -> GardenConfig:
    return load_garden_config()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        gemini_api_key="test-gemini-key",
    )


@pytest.fixture
def store(settings: Settings, garden_config: GardenConfig) -> JsonGardenStore:
    return JsonGardenStore(settings.data_dir, config=garden_config)


@pytest.fixture
def engine(store: JsonGardenStore, garden_config: GardenConfig) -> GardenEngine:
    return GardenEngine(store, config=garden_config, clock=lambda: TEST_NOW)


# ---------------------------------------------------------------------------
# Chat companion
# ---------------------------------------------------------------------------


@pytest.fixture
def gemini_reply_raw() -> dict:
    return json.loads((FIXTURES_DIR / "gemini_generate_content.json").read_text())


@pytest.fixture
def mock_http_client(gemini_reply_raw: dict) -> AsyncMock:
    """An httpx.AsyncClient stand-in that answers every POST with the recorded reply."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.post.return_value = gemini_response(json=gemini_reply_raw)
    return client


@pytest.fixture
def chatbot(settings: Settings, mock_http_client: AsyncMock) -> GardenChatbot:
    return GardenChatbot(settings, http_client=mock_http_client)


@pytest.fixture
def offline_chatbot(settings: Settings) -> GardenChatbot:
    """A chatbot with no API key configured."""
    return GardenChatbot(settings.model_copy(update={"gemini_api_key": ""}))


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


@pytest.fixture
def api_client(engine: GardenEngine, offline_chatbot: GardenChatbot) -> TestClient:
    """TestClient with the engine and chatbot swapped for test instances.

    Used without a ``with`` block so the lifespan's growth ticker never starts.
    """
    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_chatbot] = lambda: offline_chatbot
    return TestClient(app)
