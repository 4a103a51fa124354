"""Message content and payload assembly shared by replies, edits and sends."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from discord_menus.builders import ButtonBuilder, Emoji, MenuBuilder, MenuOption, action_row
from discord_menus.errors import InvalidContentError, ValidationError


@runtime_checkable
class Embeddable(Protocol):
    """Anything that serializes to an embed dict, e.g. ``discord.Embed``."""

    def to_dict(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class TextContent:
    """Plain text message body."""

    text: str

    def apply(self, payload: dict[str, Any]) -> None:
        payload["content"] = self.text


@dataclass(frozen=True)
class RichContent:
    """Single embed message body."""

    embed: Embeddable

    def apply(self, payload: dict[str, Any]) -> None:
        try:
            payload["embeds"] = [self.embed.to_dict()]
        except Exception as e:
            raise InvalidContentError("INVALID_MESSAGE", str(e)) from e


Content = TextContent | RichContent
Buttons = ButtonBuilder | Sequence[ButtonBuilder]

# Serialize with to_dict but are components, not embeds.
_COMPONENT_TYPES = (ButtonBuilder, MenuBuilder, MenuOption, Emoji)


def as_content(message: "Content | str | Embeddable | None") -> Content:
    """Convert a caller supplied message body to Content.

    Raises:
        ValidationError: If the message is empty or of an unsupported type
    """
    if isinstance(message, TextContent | RichContent):
        if isinstance(message, TextContent) and not message.text:
            raise ValidationError("INVALID_MESSAGE")
        return message
    if not message:
        raise ValidationError("INVALID_MESSAGE")
    if isinstance(message, str):
        return TextContent(message)
    if isinstance(message, _COMPONENT_TYPES):
        raise ValidationError("INVALID_MESSAGE", f"{type(message).__name__} is not message content")
    if isinstance(message, Embeddable):
        return RichContent(message)
    raise ValidationError("INVALID_MESSAGE", f"unsupported content type {type(message).__name__}")


def build_message_payload(
    message: "Content | str | Embeddable | None",
    buttons: Buttons | None = None,
    menu: MenuBuilder | None = None,
) -> dict[str, Any]:
    """Build the ``{content, embeds, components}`` body of a message.

    Buttons share one action row; a menu takes a row of its own and cannot be
    combined with buttons.

    Raises:
        ValidationError: On empty content or when both buttons and a menu are given
        InvalidContentError: If an embed fails to serialize
        IncompleteComponentError: If a component is missing required fields
    """
    content = as_content(message)
    if buttons is not None and menu is not None:
        raise ValidationError("BUTTON_AND_MENU_PROVIDED")

    payload: dict[str, Any] = {"content": "", "embeds": [], "components": []}
    content.apply(payload)

    if buttons:
        if isinstance(buttons, ButtonBuilder):
            buttons = [buttons]
        payload["components"] = [action_row(buttons)]
    elif menu is not None:
        payload["components"] = [action_row([menu])]

    return payload
