"""
Bot client: the session with Discord plus the command and event registries
"""

import traceback
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any

import aiohttp
import discord
from discord.ext import commands

from ..config.config import PACKAGE_ROOT, Config
from ..utils.constants import COLORS, EMOJIS
from ..utils.helpers import format_duration
from .database import close_database
from .logging import get_logger
from .plugins import (
    LoadReport,
    bind_event_module,
    discover_handlers,
    import_descriptor,
    load_each,
    register_command_module,
)


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class NexusBot(commands.Bot):
    """
    Discord bot client with plugin loading and connection state tracking
    """

    def __init__(self, config: Config):
        self.config = config

        # Configure intents
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.guilds = True

        super().__init__(
            command_prefix=self._get_prefix,
            intents=intents,
            case_insensitive=True,
            strip_after_prefix=True,
            allowed_mentions=discord.AllowedMentions(
                everyone=False, users=True, roles=False, replied_user=True
            ),
            max_messages=config.bot.max_messages,
            owner_ids=set(config.owner_ids) if config.owner_ids else None,
        )

        self.logger = get_logger("core")
        self.connection_state = ConnectionState.DISCONNECTED
        self.session: Optional[aiohttp.ClientSession] = None
        self.dashboard = None

        # Bot state
        self.start_time = datetime.now(timezone.utc)

        # Statistics
        self.command_stats: Dict[str, int] = {}
        self.error_count = 0

    @property
    def event_bindings(self) -> Dict[str, List[Any]]:
        """Listeners bound through ``add_listener``, keyed by event name"""
        return self.extra_events

    async def _get_prefix(self, bot, message: discord.Message) -> List[str]:
        return commands.when_mentioned_or(self.config.bot.default_prefix)(bot, message)

    async def setup_hook(self):
        # Create HTTP session
        self.session = aiohttp.ClientSession()

    async def load_commands(self, directory, package: Optional[str] = None) -> LoadReport:
        """Load every command module found in ``directory``

        Modules with a dotted name are loaded as discord.py extensions; the
        rest are imported from their file and their commands registered.
        """

        async def load(descriptor):
            if descriptor.module_name:
                await self.load_extension(descriptor.module_name)
            else:
                register_command_module(self, import_descriptor(descriptor))

        discovery = discover_handlers(directory, package or self._package_for(directory))
        return await load_each(discovery, load, self.logger, "command")

    async def load_events(self, directory, package: Optional[str] = None) -> LoadReport:
        """Bind every event module found in ``directory``"""

        def load(descriptor):
            bind_event_module(self, import_descriptor(descriptor))

        discovery = discover_handlers(directory, package or self._package_for(directory))
        return await load_each(discovery, load, self.logger, "event")

    @staticmethod
    def _package_for(directory) -> Optional[str]:
        """Dotted package name for the bundled plugin directories"""
        try:
            relative = Path(directory).resolve().relative_to(PACKAGE_ROOT)
        except ValueError:
            return None
        return ".".join((PACKAGE_ROOT.name, *relative.parts))

    async def login(self, token: str) -> None:
        self.connection_state = ConnectionState.CONNECTING
        try:
            await super().login(token)
        except BaseException:
            self.connection_state = ConnectionState.DISCONNECTED
            raise
        self.connection_state = ConnectionState.CONNECTED
        self.logger.info("Authenticated with Discord")

    async def on_command(self, ctx: commands.Context):
        """Handle command invocation"""
        command_name = ctx.command.qualified_name
        self.command_stats[command_name] = self.command_stats.get(command_name, 0) + 1

        self.logger.debug(
            f"Command invoked: {command_name} by {ctx.author} in {ctx.guild}"
        )

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Reply to the user for expected errors, log the rest"""
        self.error_count += 1

        # Get original error
        error = getattr(error, "original", error)

        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.MissingRequiredArgument):
            description = f"Missing required argument: `{error.param.name}`"
        elif isinstance(error, commands.BadArgument):
            description = str(error)
        elif isinstance(error, commands.CheckFailure):
            description = "You don't have permission to use this command."
        elif isinstance(error, commands.CommandOnCooldown):
            description = f"Try again in {format_duration(error.retry_after)}"
        else:
            self.logger.error(f"Unexpected error in {ctx.command}: {error}")
            self.logger.error(
                "".join(traceback.format_exception(type(error), error, error.__traceback__))
            )
            description = "An unexpected error occurred. Please try again later."

        embed = discord.Embed(
            title=f"{EMOJIS['error']} Command Failed",
            description=description,
            color=COLORS["error"],
        )
        try:
            await ctx.send(embed=embed)
        except discord.HTTPException:
            pass

    def get_stats(self) -> Dict[str, Any]:
        """Get bot statistics"""
        uptime = datetime.now(timezone.utc) - self.start_time

        return {
            "user": str(self.user) if self.user else None,
            "state": self.connection_state.value,
            "guilds": len(self.guilds),
            "commands": len(self.all_commands),
            "events": sum(len(listeners) for listeners in self.event_bindings.values()),
            "uptime": format_duration(uptime),
            "commands_used": sum(self.command_stats.values()),
            "errors": self.error_count,
        }

    async def close(self):
        """Clean shutdown"""
        self.logger.info("Shutting down bot...")

        if self.dashboard is not None:
            await self.dashboard.cleanup()
            self.dashboard = None

        if self.session:
            await self.session.close()

        await close_database()

        await super().close()
        self.connection_state = ConnectionState.DISCONNECTED
        self.logger.info("Bot shutdown complete")
