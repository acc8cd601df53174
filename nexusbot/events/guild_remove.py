event = "guild_remove"


async def handle(bot, guild):
    bot.logger.info(f"Left guild: {guild.name} ({guild.id})")
