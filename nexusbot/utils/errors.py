"""
Custom exception classes for nexusbot
"""

from discord.ext import commands


class NexusBotError(commands.CommandError):
    """Base exception for all nexusbot errors"""

    pass


class ConfigurationError(NexusBotError):
    """Raised when there's a configuration issue"""

    pass


class StartupError(NexusBotError):
    """Raised when a startup step fails

    ``step`` names the orchestrator step the failure originated from.
    """

    def __init__(self, step: str, message: str = ""):
        self.step = step
        super().__init__(message or f"Startup step '{step}' failed")


class OptionalStepFailure(StartupError):
    """A non-fatal step failed; startup carries on without it"""

    def __init__(self, step: str, cause: BaseException):
        self.cause = cause
        super().__init__(step, f"{step} failed: {type(cause).__name__}: {cause}")


class FatalStartupError(StartupError):
    """Raised when startup cannot continue; the process exits with status 1"""

    pass


class ValidationFailedError(FatalStartupError):
    """Configuration validation failed under the ``exit`` policy"""

    pass


class ClientUnavailableError(FatalStartupError):
    """No usable client could be constructed"""

    pass


class DatabaseInitError(FatalStartupError):
    """Database initialization failed under the ``fatal`` policy"""

    pass


class MissingCredentialError(FatalStartupError):
    """The bot token is not set"""

    pass


class LoginError(FatalStartupError):
    """The chat service rejected the login or could not be reached"""

    pass


class PluginLoadError(NexusBotError):
    """Raised when a single command or event module fails to load"""

    def __init__(self, descriptor, cause: BaseException):
        self.descriptor = descriptor
        self.cause = cause
        super().__init__(
            f"Failed to load {descriptor.name}: {type(cause).__name__}: {cause}"
        )
