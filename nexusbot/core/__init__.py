"""
Core components for nexusbot
"""

from .bot import ConnectionState, NexusBot
from .database import DatabaseManager
from .handlers import FatalHandlers, install_fatal_handlers
from .logging import setup_logging
from .orchestrator import Collaborators, StartupOrchestrator, StartupState

__all__ = [
    "ConnectionState",
    "NexusBot",
    "DatabaseManager",
    "FatalHandlers",
    "install_fatal_handlers",
    "setup_logging",
    "Collaborators",
    "StartupOrchestrator",
    "StartupState",
]
