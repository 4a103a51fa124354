"""Tests for the DiscordMenus dispatcher."""

import json
from unittest.mock import Mock

import httpx
import pytest
import respx

from conftest import API, BOT_TOKEN, FakeGateway, Recorder
from discord_menus.builders import ButtonBuilder, MenuBuilder
from discord_menus.dispatcher import INTERACTION_CREATE, DiscordMenus, resolve_channel_id
from discord_menus.errors import InvalidClientError, ValidationError
from discord_menus.events import ErrorCode, EventChannel, EventType, WarnCode
from discord_menus.interactions import ButtonInteraction, MenuInteraction
from discord_menus.message import Message, SentMessage

CHANNEL_MESSAGES = f"{API}/channels/800000000000000001/messages"

SENT_MESSAGE = {
    "id": "900000000000000099",
    "channel_id": "800000000000000001",
    "content": "Select an option",
    "author": {"id": "1", "username": "menus-bot", "discriminator": "0420", "bot": True},
}


def _menu() -> MenuBuilder:
    return MenuBuilder().add_option("One", "one").add_option("Two", "two").set_custom_id("pick")


class TestDispatcherInit:
    """Tests for DiscordMenus construction."""

    def test_subscribes_once(self, gateway):
        """Construction registers one INTERACTION_CREATE handler."""
        DiscordMenus(gateway)
        assert len(gateway.handlers[INTERACTION_CREATE]) == 1

    def test_requires_client(self):
        """A missing client is rejected."""
        with pytest.raises(InvalidClientError) as exc:
            DiscordMenus(None)
        assert exc.value.code == "INVALID_DISCORD_CLIENT"

    def test_rejects_unusable_client(self):
        """Objects without a raw event subscription are rejected."""
        with pytest.raises(InvalidClientError):
            DiscordMenus(object())

    def test_shares_given_channel(self, gateway, events, http):
        """A provided event channel and transport are used as-is."""
        menus = DiscordMenus(gateway, http=http, events=events)
        assert menus.events is events
        assert menus.http is http

    def test_on_delegates_to_channel(self, gateway):
        """on() registers on the event channel."""
        menus = DiscordMenus(gateway)
        listener = Mock()
        menus.on(EventType.WARN, listener)
        assert menus.events.listeners(EventType.WARN) == [listener]
        assert menus.off(EventType.WARN, listener) is True


@pytest.mark.asyncio
class TestDispatch:
    """Tests for classifying raw interaction payloads."""

    async def test_button_click(self, gateway, button_payload):
        """Component type 2 publishes exactly one BUTTON_CLICKED."""
        menus = DiscordMenus(gateway)
        clicks = Recorder()
        menus.on(EventType.BUTTON_CLICKED, clicks)

        await gateway.push(INTERACTION_CREATE, button_payload)

        assert len(clicks.calls) == 1
        (button,) = clicks.calls[0]
        assert isinstance(button, ButtonInteraction)
        assert button.member.tag == "alice#1234"
        assert button._token == BOT_TOKEN

    async def test_menu_click(self, gateway, menu_payload):
        """Component type 3 publishes MENU_CLICKED with the selected values."""
        menus = DiscordMenus(gateway)
        buttons = Recorder()
        choices = Recorder()
        menus.on(EventType.BUTTON_CLICKED, buttons)
        menus.on(EventType.MENU_CLICKED, choices)

        await gateway.push(INTERACTION_CREATE, menu_payload)

        assert buttons.calls == []
        assert len(choices.calls) == 1
        (menu,) = choices.calls[0]
        assert isinstance(menu, MenuInteraction)
        assert menu.values == menu_payload["data"]["values"]

    @pytest.mark.parametrize("component_type", [1, 4, 99, None])
    async def test_other_types_ignored(self, gateway, button_payload, component_type):
        """Unsupported component types publish nothing."""
        menus = DiscordMenus(gateway)
        recorder = Recorder()
        for event in EventType:
            menus.on(event, recorder)
        button_payload["data"]["component_type"] = component_type

        results = await gateway.push(INTERACTION_CREATE, button_payload)

        assert results == [None]
        assert recorder.calls == []

    async def test_command_interaction_ignored(self, gateway):
        """Slash command payloads (no component type) are ignored."""
        DiscordMenus(gateway)
        payload = {"id": "1", "type": 2, "data": {"name": "ping"}}

        assert await gateway.push(INTERACTION_CREATE, payload) == [None]

    async def test_uses_current_token(self, button_payload):
        """The token is read at dispatch time, after login."""
        gateway = FakeGateway(token=None)
        menus = DiscordMenus(gateway)
        gateway.token = "late-token"

        (button,) = await gateway.push(INTERACTION_CREATE, button_payload)

        assert button._token == "late-token"
        assert menus.client is gateway


@pytest.mark.asyncio
class TestSend:
    """Tests for send_menu and send_button."""

    @respx.mock
    async def test_send_menu(self, gateway, message_payload, events, http):
        """send_menu posts the menu in an action row and returns the sent message."""
        route = respx.post(CHANNEL_MESSAGES).mock(
            return_value=httpx.Response(200, json=SENT_MESSAGE)
        )
        menus = DiscordMenus(gateway, http=http, events=events)
        warnings = Recorder()
        menus.on(EventType.WARN, warnings)

        source = Message(message_payload, BOT_TOKEN, events, http)
        sent = await menus.send_menu(source, "Pick", _menu())

        body = json.loads(route.calls[0].request.content)
        assert body["content"] == "Pick"
        assert body["components"] == [{"type": 1, "components": [_menu().to_dict()]}]
        assert route.calls[0].request.headers["Authorization"] == f"Bot {BOT_TOKEN}"
        assert warnings.calls == []
        assert isinstance(sent, SentMessage)
        assert sent.id == "900000000000000099"

    @respx.mock
    async def test_send_menu_without_menu_warns(self, gateway):
        """Without a menu a WARN is published and the content is still sent."""
        route = respx.post(CHANNEL_MESSAGES).mock(
            return_value=httpx.Response(200, json=SENT_MESSAGE)
        )
        menus = DiscordMenus(gateway)
        warnings = Recorder()
        menus.on(EventType.WARN, warnings)

        await menus.send_menu("800000000000000001", "No menu")

        assert warnings.calls == [(WarnCode.NO_MENU_PROVIDED,)]
        assert json.loads(route.calls[0].request.content)["components"] == []

    @respx.mock
    async def test_send_button(self, gateway):
        """send_button posts all buttons in one row."""
        route = respx.post(CHANNEL_MESSAGES).mock(
            return_value=httpx.Response(200, json=SENT_MESSAGE)
        )
        menus = DiscordMenus(gateway)
        buttons = [
            ButtonBuilder().set_style("GREEN").set_label("Button 1").set_id("coolButton1"),
            ButtonBuilder().set_style("BLURPLE").set_label("Button 2").set_id("coolButton2"),
        ]

        await menus.send_button(800000000000000001, "Click", buttons)

        row = json.loads(route.calls[0].request.content)["components"][0]
        assert [c["custom_id"] for c in row["components"]] == ["coolButton1", "coolButton2"]

    @respx.mock
    async def test_send_button_without_buttons_warns(self, gateway):
        """Without buttons a WARN is published."""
        respx.post(CHANNEL_MESSAGES).mock(return_value=httpx.Response(200, json=SENT_MESSAGE))
        menus = DiscordMenus(gateway)
        warnings = Recorder()
        menus.on(EventType.WARN, warnings)

        await menus.send_button("800000000000000001", "No buttons")

        assert warnings.calls == [(WarnCode.NO_BUTTON_PROVIDED,)]

    @respx.mock
    async def test_send_failure(self, gateway):
        """A non-200 status publishes POST_ERROR and returns None."""
        respx.post(CHANNEL_MESSAGES).mock(return_value=httpx.Response(403))
        menus = DiscordMenus(gateway)
        errors = Recorder()
        menus.on(EventType.ERROR, errors)

        sent = await menus.send_menu("800000000000000001", "Pick", _menu())

        assert sent is None
        assert errors.calls == [(ErrorCode.POST_ERROR,)]

    @respx.mock
    async def test_send_empty_content_rejected(self, gateway):
        """Empty content fails before warning or sending."""
        route = respx.post(CHANNEL_MESSAGES).mock(return_value=httpx.Response(200, json={}))
        menus = DiscordMenus(gateway)
        warnings = Recorder()
        menus.on(EventType.WARN, warnings)

        with pytest.raises(ValidationError, match="INVALID_MESSAGE"):
            await menus.send_menu("800000000000000001", "")

        assert warnings.calls == []
        assert not route.called


class TestResolveChannelId:
    """Tests for resolve_channel_id."""

    def test_raw_ids(self):
        assert resolve_channel_id(5) == 5
        assert resolve_channel_id("5") == "5"

    def test_message_snapshot(self, message_payload):
        message = Message(message_payload, BOT_TOKEN, EventChannel(), Mock())
        assert resolve_channel_id(message) == "800000000000000001"

    def test_pycord_message(self):
        """Objects with a channel use the channel's ID."""
        message = Mock()
        message.channel.id = 42
        assert resolve_channel_id(message) == 42

    def test_channel_object(self):
        """Objects without a channel use their own ID."""
        channel = Mock(spec=["id"])
        channel.id = 7
        assert resolve_channel_id(channel) == 7
