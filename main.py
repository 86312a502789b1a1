#!/usr/bin/env python3
"""
Warden - Entry Point
====================

Starts the anti-nuke moderation bot.

Reads configuration from the environment (a .env file is loaded first),
wires the error webhook into the logger and runs the Discord client until
interrupted.
"""

import asyncio
import sys

from dotenv import load_dotenv


async def main() -> None:
    """Load configuration, build the bot and connect to Discord."""
    load_dotenv()

    # Imported after load_dotenv() so LOG_DIR and friends are honoured
    from warden.bot import WardenBot
    from warden.core.config import ConfigValidationError, get_config
    from warden.core.logger import logger

    try:
        config = get_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        sys.exit(1)

    if not config.discord_token:
        logger.error("No DISCORD_TOKEN found in environment or .env file!")
        sys.exit(1)

    logger.set_webhook(config.error_webhook_url)
    logger.tree("WARDEN STARTING", [
        ("Anti-Nuke", "Enabled" if config.antinuke_enabled else "Disabled"),
        ("Threshold", str(config.threshold)),
        ("Window", f"{config.window_ms}ms"),
        ("Overrides", config.overrides_path),
    ], "🔥")

    bot = WardenBot(config)
    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Bot stopped by user (Ctrl+C)")
