"""Button and select menu interactions received from the gateway."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from discord_menus.builders import MenuBuilder
from discord_menus.content import Buttons, Content, Embeddable, build_message_payload
from discord_menus.errors import InvalidPayloadError
from discord_menus.events import ErrorCode, EventChannel
from discord_menus.http import RestClient, interaction_callback_path, send_and_report
from discord_menus.message import Message

EPHEMERAL_FLAG = 1 << 6


class CallbackType(IntEnum):
    """Interaction response types."""

    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
    DEFERRED_UPDATE_MESSAGE = 6
    UPDATE_MESSAGE = 7


@dataclass(frozen=True)
class Member:
    """User who triggered an interaction."""

    id: str
    username: str
    discriminator: str
    avatar: str | None = None

    @property
    def tag(self) -> str:
        return f"{self.username}#{self.discriminator}"

    @classmethod
    def from_interaction(cls, data: dict[str, Any]) -> "Member":
        """Read the invoking user from ``member.user`` (guilds) or ``user`` (DMs)."""
        user = (data.get("member") or {}).get("user") or data.get("user") or {}
        return cls(
            id=user.get("id", ""),
            username=user.get("username", ""),
            discriminator=user.get("discriminator", "0"),
            avatar=user.get("avatar"),
        )


class ComponentInteraction:
    """Base class for a click on a message component.

    Each response method performs exactly one POST to the interaction
    callback endpoint. A failed call publishes ERROR(POST_ERROR) on the
    event channel and returns normally.

    Args:
        data: Raw INTERACTION_CREATE payload
        token: Bot token used for outbound calls
        events: Channel that receives ERROR notifications
        http: REST transport

    Raises:
        InvalidPayloadError: If the payload or its ``data`` block is missing
    """

    def __init__(
        self,
        data: dict[str, Any] | None,
        token: str | None,
        events: EventChannel,
        http: RestClient,
    ):
        if not data or not data.get("data"):
            raise InvalidPayloadError()

        self._token = token
        self._events = events
        self._http = http
        self.id: str = data.get("id", "")
        self.application_id: str = data.get("application_id", "")
        self.guild_id: str | None = data.get("guild_id")
        self.channel_id: str = data.get("channel_id", "")
        self.token: str = data.get("token", "")
        self.custom_id: str = data["data"].get("custom_id", "")
        self.member = Member.from_interaction(data)
        message = data.get("message")
        self.message: Message | None = (
            Message(message, token, events, http) if message else None
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} custom_id={self.custom_id!r}>"

    async def _callback(self, body: dict[str, Any]) -> None:
        await send_and_report(
            self._http,
            self._events,
            self._token,
            "POST",
            interaction_callback_path(self.id, self.token),
            body,
            error=ErrorCode.POST_ERROR,
        )

    async def reply(
        self,
        message: Content | str | Embeddable,
        buttons: Buttons | None = None,
        menu: MenuBuilder | None = None,
    ) -> None:
        """Respond with a new message.

        Raises:
            ValidationError: If the message is empty
            InvalidContentError: If an embed fails to serialize
        """
        data = build_message_payload(message, buttons=buttons, menu=menu)
        await self._callback({"type": int(CallbackType.CHANNEL_MESSAGE_WITH_SOURCE), "data": data})

    async def edit(
        self,
        message: Content | str | Embeddable,
        buttons: Buttons | None = None,
        menu: MenuBuilder | None = None,
    ) -> None:
        """Update the message the component is attached to.

        Raises:
            ValidationError: If the message is empty
            InvalidContentError: If an embed fails to serialize
        """
        data = build_message_payload(message, buttons=buttons, menu=menu)
        await self._callback({"type": int(CallbackType.UPDATE_MESSAGE), "data": data})

    async def think(self) -> None:
        """Acknowledge now and show a loading state until a follow-up arrives."""
        await self._callback({"type": int(CallbackType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE)})

    acknowledge_with_loading = think

    async def defer_update(self) -> None:
        """Acknowledge without changing the message."""
        await self._callback({"type": int(CallbackType.DEFERRED_UPDATE_MESSAGE)})

    defer = defer_update


class ButtonInteraction(ComponentInteraction):
    """A button click."""

    pass


class MenuInteraction(ComponentInteraction):
    """A select menu choice.

    ``values`` holds the selected option values in the order Discord sent them.
    Responses may be ephemeral.
    """

    def __init__(
        self,
        data: dict[str, Any] | None,
        token: str | None,
        events: EventChannel,
        http: RestClient,
    ):
        super().__init__(data, token, events, http)
        self.values: list[str] = list(data["data"].get("values", []))  # type: ignore[index]

    async def reply(  # type: ignore[override]
        self,
        message: Content | str | Embeddable,
        buttons: Buttons | None = None,
        menu: MenuBuilder | None = None,
        ephemeral: bool = False,
    ) -> None:
        """Respond with a new message, optionally visible only to the user."""
        data = build_message_payload(message, buttons=buttons, menu=menu)
        data["flags"] = EPHEMERAL_FLAG if ephemeral else None
        await self._callback({"type": int(CallbackType.CHANNEL_MESSAGE_WITH_SOURCE), "data": data})

    async def think(self, ephemeral: bool = False) -> None:  # type: ignore[override]
        """Show a loading state, optionally visible only to the user."""
        await self._callback(
            {
                "type": int(CallbackType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE),
                "data": {"flags": EPHEMERAL_FLAG if ephemeral else None},
            }
        )

    acknowledge_with_loading = think
