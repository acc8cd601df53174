"""Presence and a startup summary once the gateway session is ready"""

import discord

event = "ready"


async def handle(bot):
    bot.logger.info(f"Bot ready! Logged in as {bot.user}")
    bot.logger.info(f"Serving {len(bot.guilds)} guilds")

    activity = discord.Activity(
        type=discord.ActivityType.watching,
        name=f"{len(bot.guilds)} servers | {bot.config.bot.default_prefix}help",
    )
    await bot.change_presence(activity=activity)
