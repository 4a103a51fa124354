"""Dispatcher turning raw interaction events into typed notifications."""

import logging
from typing import Any

import discord

from discord_menus.builders import ComponentType, MenuBuilder
from discord_menus.content import Buttons, Content, Embeddable, build_message_payload
from discord_menus.errors import InvalidClientError
from discord_menus.events import ErrorCode, EventChannel, EventType, Listener, WarnCode
from discord_menus.gateway import DiscordGateway, GatewayClient
from discord_menus.http import RestClient, channel_messages_path, send_and_report
from discord_menus.interactions import ButtonInteraction, ComponentInteraction, MenuInteraction
from discord_menus.message import Message, SentMessage

logger = logging.getLogger(__name__)

INTERACTION_CREATE = "INTERACTION_CREATE"

ChannelTarget = str | int | Message | discord.abc.Snowflake


class DiscordMenus:
    """Entry point: publishes component clicks and sends component messages.

    Subscribes to the client's INTERACTION_CREATE stream on construction.
    Button clicks are published as BUTTON_CLICKED, select menu choices as
    MENU_CLICKED; other component types are ignored.

    Args:
        client: A py-cord client, or any GatewayClient
        http: REST transport (a default RestClient is created if omitted)
        events: Event channel (a new one is created if omitted)

    Raises:
        InvalidClientError: If no usable client is given

    Example:
        menus = DiscordMenus(bot)

        @menus.on(EventType.MENU_CLICKED)
        async def chosen(menu):
            await menu.reply(f"You picked {', '.join(menu.values)}")
    """

    def __init__(
        self,
        client: discord.Client | GatewayClient,
        http: RestClient | None = None,
        events: EventChannel | None = None,
    ):
        if client is None:
            raise InvalidClientError()
        if isinstance(client, discord.Client):
            client = DiscordGateway(client)
        elif not isinstance(client, GatewayClient):
            raise InvalidClientError()

        self.client: GatewayClient = client
        self.http = http or RestClient()
        self.events = events or EventChannel()
        self.client.on_raw(INTERACTION_CREATE, self._on_interaction)
        logger.info("Listening for component interactions")

    def on(self, event: EventType | str, listener: Listener | None = None) -> Any:
        """Register a listener on the event channel (also usable as a decorator)."""
        return self.events.on(event, listener)

    def once(self, event: EventType | str, listener: Listener) -> Listener:
        return self.events.once(event, listener)

    def off(self, event: EventType | str, listener: Listener) -> bool:
        return self.events.off(event, listener)

    async def close(self) -> None:
        """Close the REST transport."""
        await self.http.close()

    async def _on_interaction(self, payload: dict[str, Any]) -> ComponentInteraction | None:
        component_type = (payload.get("data") or {}).get("component_type")

        if component_type == ComponentType.BUTTON:
            button = ButtonInteraction(payload, self.client.token, self.events, self.http)
            await self.events.emit(EventType.BUTTON_CLICKED, button)
            return button

        if component_type == ComponentType.SELECT_MENU:
            menu = MenuInteraction(payload, self.client.token, self.events, self.http)
            await self.events.emit(EventType.MENU_CLICKED, menu)
            return menu

        if component_type is not None:
            logger.debug("Ignoring unsupported component type %s", component_type)
        return None

    async def send_menu(
        self,
        target: ChannelTarget,
        message: Content | str | Embeddable,
        menu: MenuBuilder | None = None,
    ) -> SentMessage | None:
        """Send a new message carrying a select menu.

        Publishes WARN(NO_MENU_PROVIDED) and still sends the bare content
        when no menu is given.

        Args:
            target: Channel ID, channel, or a message whose channel to post in
            message: Text or embed
            menu: The menu (only one)

        Returns:
            The sent message, or None if the request failed
        """
        payload = build_message_payload(message, menu=menu)
        if menu is None:
            await self._warn(WarnCode.NO_MENU_PROVIDED)
        return await self._send(target, payload)

    async def send_button(
        self,
        target: ChannelTarget,
        message: Content | str | Embeddable,
        buttons: Buttons | None = None,
    ) -> SentMessage | None:
        """Send a new message carrying buttons.

        Publishes WARN(NO_BUTTON_PROVIDED) and still sends the bare content
        when no buttons are given.

        Returns:
            The sent message, or None if the request failed
        """
        payload = build_message_payload(message, buttons=buttons)
        if not buttons:
            await self._warn(WarnCode.NO_BUTTON_PROVIDED)
        return await self._send(target, payload)

    async def _warn(self, code: WarnCode) -> None:
        logger.warning("Sending message without components: %s", code.value)
        await self.events.emit(EventType.WARN, code)

    async def _send(self, target: ChannelTarget, payload: dict[str, Any]) -> SentMessage | None:
        token = self.client.token
        response = await send_and_report(
            self.http,
            self.events,
            token,
            "POST",
            channel_messages_path(resolve_channel_id(target)),
            payload,
            error=ErrorCode.POST_ERROR,
            expected_status=200,
        )
        if response is None:
            return None
        return SentMessage(response.json(), token, self.events, self.http)


def resolve_channel_id(target: ChannelTarget) -> str | int:
    """Find the channel ID for a send target.

    Accepts a raw ID, one of our Message snapshots, a py-cord message (uses
    its channel) or any object with an ``id``.
    """
    if isinstance(target, str | int):
        return target
    if isinstance(target, Message):
        return target.channel_id
    channel = getattr(target, "channel", None)
    if channel is not None:
        return channel.id
    return target.id

