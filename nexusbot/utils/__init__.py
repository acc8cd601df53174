"""
Utility functions and helpers for nexusbot
"""

from .helpers import *
from .errors import *

__all__ = [
    # Helpers
    "maybe_await",
    "format_duration",
    "mask_token",
    "create_embed",
    # Errors
    "NexusBotError",
    "ConfigurationError",
    "StartupError",
    "OptionalStepFailure",
    "FatalStartupError",
    "ValidationFailedError",
    "ClientUnavailableError",
    "DatabaseInitError",
    "MissingCredentialError",
    "LoginError",
    "PluginLoadError",
]
