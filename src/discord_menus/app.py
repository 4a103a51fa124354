"""Demo bot wiring menus and buttons to text commands."""

import logging
import os
from pathlib import Path
from typing import Any

import discord

from discord_menus.builders import ButtonBuilder, MenuBuilder
from discord_menus.config import Config
from discord_menus.dispatcher import DiscordMenus
from discord_menus.events import ErrorCode, EventType, WarnCode
from discord_menus.http import RestClient
from discord_menus.interactions import ButtonInteraction, MenuInteraction
from discord_menus.message import SentMessage

logger = logging.getLogger(__name__)


class MenusBot(discord.Bot):
    """Discord bot with a DiscordMenus dispatcher attached."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("enable_debug_events", True)
        super().__init__(*args, **kwargs)
        self.config: Config | None = None
        self.menus = DiscordMenus(self)


def sample_menu() -> MenuBuilder:
    return (
        MenuBuilder()
        .add_option("Value 1", "value-1", description="This is the value 1 description")
        .add_option("Value 2", "value-2", description="This is the value 2 description")
        .add_option(
            "Value 3",
            "value-3",
            description="This is the value 3 description (with an emoji)",
            emoji="\U0001F30C",
        )
        .set_custom_id("cool-custom-id")
        .set_placeholder("Select an option")
    )


def sample_buttons() -> list[ButtonBuilder]:
    return [
        ButtonBuilder().set_style("GREEN").set_label("Button 1").set_id("cool-button-1"),
        ButtonBuilder().set_style("BLURPLE").set_label("Button 2").set_id("cool-button-2"),
    ]


async def handle_text_command(menus: DiscordMenus, message: discord.Message) -> SentMessage | None:
    """Answer the ``menu`` and ``buttons`` text commands."""
    if message.author.bot:
        return None
    if message.content == "menu":
        return await menus.send_menu(message, "Select an option", sample_menu())
    if message.content == "buttons":
        return await menus.send_button(message, "Pick a button", sample_buttons())
    return None


async def on_menu_clicked(menu: MenuInteraction) -> None:
    logger.info("%s picked %s from %s", menu.member.tag, menu.values, menu.custom_id)
    await menu.reply(f"You picked: {', '.join(menu.values)}", ephemeral=True)


async def on_button_clicked(button: ButtonInteraction) -> None:
    logger.info("%s clicked %s", button.member.tag, button.custom_id)
    if button.custom_id == "cool-button-2":
        await button.think()
    else:
        await button.defer_update()


def on_error(code: ErrorCode) -> None:
    logger.error("Discord API call failed: %s", code.value)


def on_warn(code: WarnCode) -> None:
    logger.warning("discord-menus warning: %s", code.value)


async def load_config(bot: MenusBot) -> None:
    """Load config from CONFIG_PATH (if present) and hot reload the REST client."""
    base_config_path = Path(os.environ.get("CONFIG_PATH", "config.toml"))
    if not base_config_path.exists():
        logger.info("No config at %s, using defaults", base_config_path)
        return

    overlay_config_path = os.environ.get("CONFIG_OVERLAY_PATH")
    bot.config = Config(
        base_path=base_config_path,
        overlay_path=Path(overlay_config_path) if overlay_config_path else None,
    )
    bot.config.load()
    logger.info("Config loaded from %s", base_config_path)

    await bot.menus.http.close()
    bot.menus.http = RestClient.from_config(bot.config)
    bot.config.on_change(bot.menus.http.on_config_change)
    await bot.config.start_watching()


def create_app() -> MenusBot:
    """Create and wire the demo bot.

    Returns:
        Configured MenusBot instance ready to run.
    """
    intents = discord.Intents.default()
    intents.message_content = True
    bot = MenusBot(intents=intents)

    bot.menus.on(EventType.MENU_CLICKED, on_menu_clicked)
    bot.menus.on(EventType.BUTTON_CLICKED, on_button_clicked)
    bot.menus.on(EventType.ERROR, on_error)
    bot.menus.on(EventType.WARN, on_warn)

    @bot.event
    async def on_ready() -> None:
        logger.info("%s is online!", bot.user)
        await load_config(bot)

    @bot.event
    async def on_message(message: discord.Message) -> None:
        await handle_text_command(bot.menus, message)

    return bot
