"""Uptime and usage statistics"""

import discord
import psutil
from discord.ext import commands

from nexusbot.utils.constants import EMOJIS
from nexusbot.utils.helpers import create_embed


@commands.command()
async def uptime(ctx):
    """Shows how long the bot has been running.

    **Usage:** `{prefix}uptime`
    """
    stats = ctx.bot.get_stats()
    await ctx.send(
        embed=create_embed(
            title=f"{EMOJIS['clock']} Uptime",
            description=stats["uptime"],
            color="info",
        )
    )


@commands.command(aliases=["botinfo"])
async def stats(ctx):
    """Shows the bot's performance and usage statistics.

    **Usage:** `{prefix}stats`
    **Alias:** `{prefix}botinfo`
    """
    process = psutil.Process()
    memory_usage = process.memory_info().rss / 1024 / 1024  # MB
    bot_stats = ctx.bot.get_stats()

    embed = create_embed(title="📊 Bot Statistics", color="primary", timestamp=True)

    embed.add_field(name="Servers", value=str(bot_stats["guilds"]), inline=True)
    embed.add_field(name="Commands", value=str(bot_stats["commands"]), inline=True)
    embed.add_field(name="Event listeners", value=str(bot_stats["events"]), inline=True)
    embed.add_field(name="Memory Usage", value=f"{memory_usage:.1f} MB", inline=True)
    embed.add_field(name="Uptime", value=bot_stats["uptime"], inline=True)
    embed.add_field(
        name="Latency", value=f"{round(ctx.bot.latency * 1000)}ms", inline=True
    )
    embed.add_field(name="Commands used", value=str(bot_stats["commands_used"]), inline=True)
    embed.add_field(name="discord.py", value=discord.__version__, inline=True)

    await ctx.send(embed=embed)


async def setup(bot):
    bot.add_command(uptime)
    bot.add_command(stats)
