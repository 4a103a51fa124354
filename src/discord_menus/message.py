"""Snapshots of channel messages with delete/edit operations."""

from dataclasses import dataclass
from typing import Any

from discord_menus.builders import MenuBuilder
from discord_menus.content import Buttons, Content, Embeddable, build_message_payload
from discord_menus.events import ErrorCode, EventChannel
from discord_menus.http import RestClient, channel_message_path, send_and_report


@dataclass(frozen=True)
class Author:
    """Author of a message."""

    id: str
    username: str
    discriminator: str
    avatar: str | None = None
    bot: bool = False

    @property
    def tag(self) -> str:
        return f"{self.username}#{self.discriminator}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Author":
        """Create Author from a Discord user object."""
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            discriminator=data.get("discriminator", "0"),
            avatar=data.get("avatar"),
            bot=data.get("bot", False),
        )


class Message:
    """A channel message as it was when the payload was received.

    The snapshot is never refreshed; ``delete`` acts on the message ID only.

    Args:
        data: Raw Discord message object
        token: Bot token used for outbound calls
        events: Channel that receives ERROR notifications
        http: REST transport
    """

    def __init__(
        self,
        data: dict[str, Any],
        token: str | None,
        events: EventChannel,
        http: RestClient,
    ):
        self._token = token
        self._events = events
        self._http = http
        self.id: str = data.get("id", "")
        self.type: int | None = data.get("type")
        self.channel_id: str = data.get("channel_id", "")
        self.content: str = data.get("content", "")
        self.timestamp: str | None = data.get("timestamp")
        self.mentions: list[dict[str, Any]] = list(data.get("mentions", []))
        self.embeds: list[dict[str, Any]] = list(data.get("embeds", []))
        self.components: list[dict[str, Any]] = list(data.get("components", []))
        author = data.get("author")
        self.author: Author | None = Author.from_dict(author) if author else None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} channel_id={self.channel_id}>"

    async def delete(self) -> None:
        """Delete the message. Publishes ERROR(DELETE_ERROR) unless Discord answers 204."""
        await send_and_report(
            self._http,
            self._events,
            self._token,
            "DELETE",
            channel_message_path(self.channel_id, self.id),
            error=ErrorCode.DELETE_ERROR,
            expected_status=204,
        )


class SentMessage(Message):
    """A message sent by the bot, which it may also edit."""

    async def edit(
        self,
        message: Content | str | Embeddable,
        buttons: Buttons | None = None,
        menu: MenuBuilder | None = None,
    ) -> None:
        """Replace the message content and components.

        Don't pass a menu if the message already contains one.

        Args:
            message: New text or embed
            buttons: Button or buttons to attach (exclusive with menu)
            menu: Select menu to attach (exclusive with buttons)

        Raises:
            ValidationError: On empty content or when both buttons and menu are given
        """
        payload = build_message_payload(message, buttons=buttons, menu=menu)
        await send_and_report(
            self._http,
            self._events,
            self._token,
            "PATCH",
            channel_message_path(self.channel_id, self.id),
            payload,
            error=ErrorCode.POST_ERROR,
            expected_status=200,
        )
