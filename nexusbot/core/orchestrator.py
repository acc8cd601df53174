"""
Startup sequence for the bot process

The orchestrator runs a fixed list of steps. Optional steps that fail are
logged and skipped; fatal ones log, call ``exit_func(1)`` and stop the
sequence. Collaborators are plain callables handed in by the composition
root (see :mod:`nexusbot.main`); a ``None`` collaborator is simply absent.
"""

import asyncio
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from .. import __version__
from ..config.config import (
    TOKEN_VARIABLES,
    BranchingPolicy,
    Config,
    DatabaseFailurePolicy,
    ValidationFailurePolicy,
    load_config,
)
from ..utils.constants import STARTUP_BANNER, SUPPORT_URL
from ..utils.errors import (
    ClientUnavailableError,
    ConfigurationError,
    DatabaseInitError,
    FatalStartupError,
    LoginError,
    MissingCredentialError,
    OptionalStepFailure,
    ValidationFailedError,
)
from ..utils.helpers import mask_token, maybe_await
from .handlers import FatalHandlers, install_fatal_handlers
from .logging import get_logger
from .plugins import (
    bind_event_module,
    discover_handlers,
    import_descriptor,
    load_each,
    register_command_module,
)


class StartupState(Enum):
    IDLE = "idle"
    CONFIG_LOADED = "config_loaded"
    BANNER_PRINTED = "banner_printed"
    VALIDATED = "validated"
    CLIENT_CONSTRUCTED = "client_constructed"
    HANDLERS_INSTALLED = "handlers_installed"
    UPDATE_CHECKED = "update_checked"
    DASHBOARD_OR_DB_ATTEMPTED = "dashboard_or_db_attempted"
    COMMANDS_LOADED = "commands_loaded"
    EVENTS_LOADED = "events_loaded"
    LOGGED_IN = "logged_in"
    FATAL_EXIT = "fatal_exit"


@dataclass
class Collaborators:
    """Optional startup capabilities; ``None`` means the capability is absent"""

    check_for_updates: Optional[Callable[[], Any]] = None
    validate_configuration: Optional[Callable[[], Any]] = None
    initialize_database: Optional[Callable[[], Any]] = None
    launch_dashboard: Optional[Callable[[Any], Any]] = None


class StartupOrchestrator:
    def __init__(
        self,
        collaborators=None,
        client_factory: Optional[Callable[[Config], Any]] = None,
        *,
        config_loader: Callable[..., Config] = load_config,
        dotenv_path=None,
        exit_func: Callable[[int], None] = sys.exit,
        echo: Callable[[str], None] = print,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        # Either a Collaborators instance or a factory taking the loaded Config
        self._collaborators_source = collaborators
        self.collaborators = Collaborators()
        self.client_factory = client_factory
        self.config_loader = config_loader
        self.dotenv_path = dotenv_path
        self.exit_func = exit_func
        self.echo = echo
        self.loop = loop

        self.logger = get_logger("startup")
        self.state = StartupState.IDLE
        self.config: Optional[Config] = None
        self.client = None
        self.handlers: Optional[FatalHandlers] = None
        self.failures: List[OptionalStepFailure] = []

    @property
    def log(self):
        """The client's logger once there is one, the startup logger before"""
        logger = getattr(self.client, "logger", None)
        return logger if logger is not None else self.logger

    async def run(self) -> StartupState:
        """Run every startup step and return the terminal state"""
        try:
            self.load_configuration()
            self.print_banner()
            await self.validate_configuration()
            self.construct_client()
            self.install_handlers()
            await self.check_for_updates()
            await self.initialize_services()
            await self.load_commands()
            await self.load_events()
            await self.login()
        except FatalStartupError as e:
            self._fatal(e)
        except Exception as e:
            self.log.critical("Startup error", exc_info=e)
            self._fatal(None)
        return self.state

    def _fatal(self, error: Optional[FatalStartupError]):
        if error is not None:
            self.log.critical(f"Fatal error during {error.step}: {error}")
        self.state = StartupState.FATAL_EXIT
        self.exit_func(1)

    def _skip(self, step: str, error: BaseException):
        failure = OptionalStepFailure(step, error)
        self.failures.append(failure)
        self.log.warning(f"{failure}; continuing startup")
        return failure

    async def _bounded(self, awaitable_or_value, timeout: Optional[float]):
        if timeout and timeout > 0:
            return await asyncio.wait_for(maybe_await(awaitable_or_value), timeout)
        return await maybe_await(awaitable_or_value)

    # Steps

    def load_configuration(self):
        if self.dotenv_path is not None:
            self.config = self.config_loader(self.dotenv_path)
        else:
            self.config = self.config_loader()

        if callable(self._collaborators_source):
            self.collaborators = self._collaborators_source(self.config)
        elif self._collaborators_source is not None:
            self.collaborators = self._collaborators_source

        self.state = StartupState.CONFIG_LOADED

    def print_banner(self):
        try:
            self.echo(STARTUP_BANNER.format(version=f"v{__version__}", support=SUPPORT_URL))
        except Exception as e:
            self.logger.debug(f"Could not print banner: {e}")
        self.logger.info(f"Starting NexusBot v{__version__}...")
        self.logger.info(f"Environment: {self.config.environment.value}")
        self.state = StartupState.BANNER_PRINTED

    async def validate_configuration(self):
        # Settings that could not be parsed fell back to defaults at load time
        problems = [str(problem) for problem in getattr(self.config, "problems", [])]
        cause = None

        validator = self.collaborators.validate_configuration
        if validator is None:
            self.logger.info("Skipping configuration validation: no validator registered")
        else:
            try:
                await maybe_await(validator())
            except Exception as e:
                error = e if isinstance(e, ConfigurationError) else ConfigurationError(str(e))
                problems.append(str(error))
                cause = e

        if problems:
            message = "; ".join(problems)
            self.logger.error(f"Configuration validation failed: {message}")
            if self.config.startup.on_validation_failure is ValidationFailurePolicy.EXIT:
                raise ValidationFailedError("validate_configuration", message) from cause
        elif validator is not None:
            self.logger.info("Configuration is valid")
        self.state = StartupState.VALIDATED

    def construct_client(self):
        if self.client_factory is None:
            raise ClientUnavailableError("construct_client", "No client type is available")

        try:
            client = self.client_factory(self.config)
        except Exception as e:
            raise ClientUnavailableError(
                "construct_client", f"Client could not be constructed: {e}"
            ) from e

        if not callable(getattr(client, "login", None)):
            raise ClientUnavailableError(
                "construct_client", f"{type(client).__name__} has no login capability"
            )

        self.client = client
        self.state = StartupState.CLIENT_CONSTRUCTED

    def install_handlers(self):
        self.handlers = install_fatal_handlers(
            getattr(self.client, "logger", None),
            loop=self.loop,
            terminate=self.config.startup.terminate_on_uncaught,
            exit_func=self.exit_func,
        )
        self.state = StartupState.HANDLERS_INSTALLED

    async def check_for_updates(self):
        checker = self.collaborators.check_for_updates
        if checker is None:
            self.log.info("Skipping update check: no update checker registered")
        else:
            try:
                await self._bounded(checker(), self.config.startup.update_check_timeout)
            except Exception as e:
                self._skip("check_for_updates", e)
        self.state = StartupState.UPDATE_CHECKED

    def _dashboard_enabled(self) -> bool:
        client_config = getattr(self.client, "config", None)
        dashboard = getattr(client_config, "dashboard", None)
        if dashboard is None:
            dashboard = self.config.dashboard
        return bool(getattr(dashboard, "enabled", False))

    async def initialize_services(self):
        """Dashboard and database steps, combined per the branching policy"""
        dashboard_enabled = self._dashboard_enabled()

        if self.config.startup.branching is BranchingPolicy.EXCLUSIVE:
            if dashboard_enabled:
                await self.launch_dashboard()
            else:
                await self.initialize_database()
        else:
            await self.initialize_database()
            if dashboard_enabled:
                await self.launch_dashboard()
            else:
                self.log.debug("Dashboard disabled")

        self.state = StartupState.DASHBOARD_OR_DB_ATTEMPTED

    async def launch_dashboard(self):
        launcher = self.collaborators.launch_dashboard
        if launcher is None:
            self.log.warning("Dashboard is enabled but no dashboard launcher is registered")
            return

        self.log.info("Launching dashboard...")
        try:
            await self._bounded(launcher(self.client), self.config.startup.dashboard_timeout)
        except Exception as e:
            self._skip("launch_dashboard", e)

    async def initialize_database(self):
        initializer = self.collaborators.initialize_database
        if initializer is None:
            self.log.info("Skipping database initialization: no database initializer registered")
            return

        try:
            await self._bounded(initializer(), self.config.startup.database_timeout)
        except Exception as e:
            if self.config.startup.db_init_failure is DatabaseFailurePolicy.FATAL:
                raise DatabaseInitError(
                    "initialize_database", f"Failed to initialize database: {e}"
                ) from e
            self._skip("initialize_database", e)
        else:
            self.log.info("Database initialized")

    async def load_commands(self):
        directory = self.config.paths.commands_dir
        loader = getattr(self.client, "load_commands", None)

        try:
            if callable(loader):
                await maybe_await(loader(directory))
            elif callable(getattr(self.client, "add_command", None)):
                await load_each(
                    discover_handlers(directory),
                    lambda d: register_command_module(self.client, import_descriptor(d)),
                    self.log,
                    "command",
                )
            else:
                self.log.warning("Client exposes no command registry; skipping commands")
        except Exception as e:
            self._skip("load_commands", e)
        self.state = StartupState.COMMANDS_LOADED

    async def load_events(self):
        directory = self.config.paths.events_dir
        loader = getattr(self.client, "load_events", None)

        try:
            if callable(loader):
                await maybe_await(loader(directory))
            elif callable(getattr(self.client, "add_listener", None)):
                await load_each(
                    discover_handlers(directory),
                    lambda d: bind_event_module(self.client, import_descriptor(d)),
                    self.log,
                    "event",
                )
            else:
                self.log.warning("Client exposes no event binding; skipping events")
        except Exception as e:
            self._skip("load_events", e)
        self.state = StartupState.EVENTS_LOADED

    async def login(self):
        token = self.config.bot.token
        if not token:
            expected = " or ".join(TOKEN_VARIABLES)
            raise MissingCredentialError("login", f"{expected} not set in environment. Exiting.")

        source = self.config.bot.token_source or "config"
        self.log.info(f"Logging in with token {mask_token(token)} from {source}")
        try:
            await self._bounded(self.client.login(token), self.config.startup.login_timeout)
        except asyncio.TimeoutError as e:
            raise LoginError("login", "Login timed out") from e
        except Exception as e:
            raise LoginError("login", f"Login failed: {type(e).__name__}: {e}") from e

        self.log.info("Bot started successfully.")
        self.state = StartupState.LOGGED_IN
