"""
Shared test fixtures for request desk tests.
Trello is replaced by an in-memory board service behind httpx.MockTransport.
"""

import json

import pytest

from requestdesk.core.board_config import parse_desk_config
from requestdesk.core.config import get_settings
from requestdesk.services import TrelloAPIClient

from .fakes import APP_KEY, USER_TOKEN, FakeTrello

# ============================================
# Fixtures
# ============================================


CONFIG_DATA = {
    "trelloBoards": [
        {"frontendEventSelection": "Off Season", "trelloId": "offseason1", "enabled": True},
        {"frontendEventSelection": "Championship", "trelloId": "champ1", "enabled": False},
    ],
    "trelloBoardLabels": [
        {"name": "Mechanical", "color": "orange"},
        {"name": "Electrical", "color": "yellow"},
        {"name": "High priority", "color": "red"},
        {"name": "Low priority", "color": "green"},
    ],
    "defaultEvent": "Off Season",
}


@pytest.fixture
def config_data():
    return json.loads(json.dumps(CONFIG_DATA))


@pytest.fixture
def desk_config(config_data):
    return parse_desk_config(config_data)


@pytest.fixture
def fake_trello():
    fake = FakeTrello()
    fake.add_board("offseason1", labels=["Mechanical", "High priority", "FTA"])
    fake.add_board("champ1", labels=[])
    return fake


@pytest.fixture
def trello(fake_trello):
    return TrelloAPIClient(APP_KEY, USER_TOKEN, timeout=5.0, transport=fake_trello.transport)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Every test gets its own settings, no real .env, no log file."""
    monkeypatch.setenv("TRELLO_APP_KEY", APP_KEY)
    monkeypatch.setenv("TRELLO_USER_TOKEN", USER_TOKEN)
    monkeypatch.setenv("API_KEY", "secret-api-key")
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.setenv("BOARDS_CONFIG_PATH", str(tmp_path / "config.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
