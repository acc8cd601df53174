event = "guild_join"


async def handle(bot, guild):
    bot.logger.info(f"Joined guild: {guild.name} ({guild.id})")
