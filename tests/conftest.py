"""Shared fixtures for discord-menus tests."""

from copy import deepcopy
from pathlib import Path
from typing import Any

import pytest

from discord_menus.events import EventChannel
from discord_menus.http import RestClient

API = "https://discord.com/api/v9"
BOT_TOKEN = "bot-token"

SAMPLE_MESSAGE = {
    "id": "900000000000000001",
    "type": 0,
    "channel_id": "800000000000000001",
    "content": "Select an option",
    "timestamp": "2021-06-01T12:00:00.000000+00:00",
    "mentions": [],
    "embeds": [],
    "components": [
        {
            "type": 1,
            "components": [{"type": 2, "style": 1, "custom_id": "coolButton1", "label": "1"}],
        }
    ],
    "author": {
        "id": "700000000000000001",
        "username": "menus-bot",
        "discriminator": "0420",
        "avatar": None,
        "bot": True,
    },
}

SAMPLE_BUTTON_INTERACTION = {
    "id": "600000000000000001",
    "application_id": "500000000000000001",
    "type": 3,
    "guild_id": "400000000000000001",
    "channel_id": "800000000000000001",
    "token": "interaction-token",
    "version": 1,
    "data": {"component_type": 2, "custom_id": "coolButton1"},
    "member": {
        "user": {
            "id": "300000000000000001",
            "username": "alice",
            "discriminator": "1234",
            "avatar": "abcdef",
        }
    },
    "message": SAMPLE_MESSAGE,
}

SAMPLE_MENU_INTERACTION = {
    **SAMPLE_BUTTON_INTERACTION,
    "id": "600000000000000002",
    "data": {
        "component_type": 3,
        "custom_id": "cool-custom-id",
        "values": ["value-3", "value-1"],
    },
}


class FakeGateway:
    """GatewayClient double that lets tests push raw events."""

    def __init__(self, token: str | None = BOT_TOKEN):
        self.token = token
        self.handlers: dict[str, list] = {}

    def on_raw(self, event: str, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def push(self, event: str, payload: dict[str, Any]) -> list:
        return [await handler(payload) for handler in self.handlers.get(event, [])]


class Recorder:
    """Listener collecting the arguments it was called with."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)


@pytest.fixture
def button_payload() -> dict[str, Any]:
    return deepcopy(SAMPLE_BUTTON_INTERACTION)


@pytest.fixture
def menu_payload() -> dict[str, Any]:
    return deepcopy(SAMPLE_MENU_INTERACTION)


@pytest.fixture
def message_payload() -> dict[str, Any]:
    return deepcopy(SAMPLE_MESSAGE)


@pytest.fixture
def events() -> EventChannel:
    return EventChannel()


@pytest.fixture
def http() -> RestClient:
    return RestClient()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def base_config_content() -> str:
    """Minimal valid TOML config."""
    return """
[api]
base_url = "https://example.test/api"
version = 10
timeout = 5.0
"""


@pytest.fixture
def base_config_file(tmp_path: Path, base_config_content: str) -> Path:
    """Create a temporary base config file."""
    config_file = tmp_path / "config.toml"
    config_file.write_text(base_config_content)
    return config_file
