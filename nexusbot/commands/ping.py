"""Latency check"""

from discord.ext import commands

from nexusbot.utils.constants import EMOJIS
from nexusbot.utils.helpers import create_embed


@commands.command()
async def ping(ctx):
    """Shows the bot's websocket latency.

    **Usage:** `{prefix}ping`
    """
    embed = create_embed(
        title=f"{EMOJIS['ping']} Pong!",
        description=f"Latency: {round(ctx.bot.latency * 1000)}ms",
        color="info",
    )
    await ctx.send(embed=embed)


async def setup(bot):
    bot.add_command(ping)
