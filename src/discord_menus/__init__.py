"""Buttons and select menus for Discord bots."""

__version__ = "0.1.0"

from discord_menus.builders import (
    ButtonBuilder,
    ButtonStyle,
    ComponentType,
    Emoji,
    MenuBuilder,
    MenuOption,
    action_row,
)
from discord_menus.config import Config
from discord_menus.content import RichContent, TextContent, build_message_payload
from discord_menus.dispatcher import DiscordMenus
from discord_menus.errors import (
    DiscordMenusError,
    IncompleteComponentError,
    InvalidClientError,
    InvalidContentError,
    InvalidPayloadError,
    ValidationError,
)
from discord_menus.events import ErrorCode, EventChannel, EventType, WarnCode
from discord_menus.gateway import DiscordGateway, GatewayClient
from discord_menus.http import RestClient
from discord_menus.interactions import (
    ButtonInteraction,
    CallbackType,
    ComponentInteraction,
    Member,
    MenuInteraction,
)
from discord_menus.message import Author, Message, SentMessage

__all__ = [
    "Author",
    "ButtonBuilder",
    "ButtonInteraction",
    "ButtonStyle",
    "CallbackType",
    "ComponentInteraction",
    "ComponentType",
    "Config",
    "DiscordGateway",
    "DiscordMenus",
    "DiscordMenusError",
    "Emoji",
    "ErrorCode",
    "EventChannel",
    "EventType",
    "GatewayClient",
    "IncompleteComponentError",
    "InvalidClientError",
    "InvalidContentError",
    "InvalidPayloadError",
    "Member",
    "MenuBuilder",
    "MenuInteraction",
    "MenuOption",
    "Message",
    "RestClient",
    "RichContent",
    "SentMessage",
    "TextContent",
    "ValidationError",
    "WarnCode",
    "__version__",
    "action_row",
    "build_message_payload",
]
