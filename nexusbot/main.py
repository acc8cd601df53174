"""
Main entry point for nexusbot
"""

import asyncio
import functools
import logging
import signal
import sys
from pathlib import Path

from .config.config import Config, load_config
from .core.bot import NexusBot
from .core.database import initialize_database
from .core.logging import setup_logging
from .core.orchestrator import Collaborators, StartupOrchestrator, StartupState
from .services.dashboard import launch_dashboard
from .services.updates import check_for_updates
from .services.validation import validate_configuration


def load_and_configure(dotenv_path=None) -> Config:
    """Load the configuration and set up logging from it"""
    config = load_config(dotenv_path)
    setup_logging(config)
    return config


def build_collaborators(config: Config) -> Collaborators:
    """Resolve the optional startup capabilities for ``config``

    The update checker and database initializer are only present when they
    are configured.
    """
    return Collaborators(
        check_for_updates=(
            functools.partial(check_for_updates, config)
            if config.updates.repository
            else None
        ),
        validate_configuration=functools.partial(validate_configuration, config),
        initialize_database=(
            functools.partial(initialize_database, config) if config.database.uri else None
        ),
        launch_dashboard=launch_dashboard,
    )


async def main(dotenv_path: Path | str | None = None) -> int:
    """Run the startup sequence, then stay connected until shutdown"""
    orchestrator = StartupOrchestrator(
        build_collaborators,
        NexusBot,
        config_loader=load_and_configure,
        dotenv_path=dotenv_path,
    )

    try:
        state = await orchestrator.run()
    except SystemExit:
        if orchestrator.client is not None:
            await orchestrator.client.close()
        raise

    logger = logging.getLogger("nexusbot")
    bot = orchestrator.client
    if state is not StartupState.LOGGED_IN:
        return 1

    # Setup signal handlers for graceful shutdown
    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        asyncio.create_task(bot.close())

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        await bot.connect(reconnect=True)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise
    finally:
        if not bot.is_closed():
            await bot.close()
        if orchestrator.handlers is not None:
            orchestrator.handlers.uninstall()
        logger.info("Bot shutdown complete")

    return 0


def run(dotenv_path=None):
    """Console-script entry point"""
    try:
        sys.exit(asyncio.run(main(dotenv_path=dotenv_path)))
    except KeyboardInterrupt:
        print("\nShutdown complete!")
    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
