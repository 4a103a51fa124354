"""discord-menus demo bot - Entry point."""

import logging
import os

from discord_menus.app import create_app


def main() -> None:
    """Run the demo bot."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    token = os.environ.get("TOKEN")
    if not token:
        raise ValueError("TOKEN environment variable required")

    bot = create_app()
    bot.run(token)


if __name__ == "__main__":
    main()
