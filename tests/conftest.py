"""Shared fixtures: a clean environment, fake clients and a recording exit."""

from __future__ import annotations

import logging
import sys
from typing import Any

import pytest

from nexusbot.config.config import Config
from nexusbot.core.bot import ConnectionState
from nexusbot.core.orchestrator import StartupOrchestrator

CONFIG_VARS = (
    "BOT_TOKEN",
    "DISCORD_TOKEN",
    "DEFAULT_PREFIX",
    "MAX_MESSAGES",
    "ENVIRONMENT",
    "OWNERS",
    "MONGO_URI",
    "MONGO_CONNECTION",
    "DATABASE_NAME",
    "SERVER_SELECTION_TIMEOUT_MS",
    "CONNECTION_TIMEOUT_MS",
    "MAX_POOL_SIZE",
    "MIN_POOL_SIZE",
    "DASHBOARD_ENABLED",
    "DASHBOARD_HOST",
    "DASHBOARD_PORT",
    "DASHBOARD_BASE_URL",
    "UPDATE_CHECK_REPO",
    "UPDATE_CHECK_API",
    "ON_VALIDATION_FAILURE",
    "DB_INIT_FAILURE",
    "STARTUP_BRANCHING",
    "TERMINATE_ON_UNCAUGHT",
    "UPDATE_CHECK_TIMEOUT",
    "DATABASE_INIT_TIMEOUT",
    "DASHBOARD_LAUNCH_TIMEOUT",
    "LOGIN_TIMEOUT",
    "COMMANDS_DIR",
    "EVENTS_DIR",
    "LOG_LEVEL",
    "LOG_FILE_PATH",
    "LOG_MAX_FILE_SIZE",
    "LOG_BACKUP_COUNT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Start every test from an environment with no bot settings."""
    for name in CONFIG_VARS:
        # setenv first so monkeypatch also undoes values written by load_dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    empty = tmp_path / "empty_plugins"
    empty.mkdir()
    monkeypatch.setenv("COMMANDS_DIR", str(empty))
    monkeypatch.setenv("EVENTS_DIR", str(empty))

    previous_hook = sys.excepthook
    yield
    sys.excepthook = previous_hook


class RecordingExit:
    """Stands in for sys.exit; records the status instead of exiting."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def __call__(self, status: int) -> None:
        self.calls.append(status)

    @property
    def called(self) -> bool:
        return bool(self.calls)


class FakeClient:
    """Client with registries and a scripted login, no network."""

    def __init__(self, config: Config, login_error: BaseException | None = None) -> None:
        self.config = config
        self.logger = logging.getLogger("nexusbot.tests.client")
        self.commands: dict[str, Any] = {}
        self.events: dict[str, list[Any]] = {}
        self.connection_state = ConnectionState.DISCONNECTED
        self.login_calls: list[str] = []
        self.login_error = login_error

    def add_command(self, command) -> None:
        if command.name in self.commands:
            raise ValueError(f"duplicate command {command.name}")
        self.commands[command.name] = command

    def add_listener(self, func, name) -> None:
        self.events.setdefault(name, []).append(func)

    async def login(self, token: str) -> None:
        self.login_calls.append(token)
        self.connection_state = ConnectionState.CONNECTING
        if self.login_error is not None:
            self.connection_state = ConnectionState.DISCONNECTED
            raise self.login_error
        self.connection_state = ConnectionState.CONNECTED


@pytest.fixture
def exit_recorder() -> RecordingExit:
    return RecordingExit()


@pytest.fixture
def make_orchestrator(exit_recorder):
    """Build orchestrators that read Config straight from the environment."""
    printed: list[str] = []

    def factory(collaborators=None, client_factory=FakeClient, **kwargs):
        kwargs.setdefault("config_loader", lambda *args: Config())
        kwargs.setdefault("exit_func", exit_recorder)
        kwargs.setdefault("echo", printed.append)
        orchestrator = StartupOrchestrator(collaborators, client_factory, **kwargs)
        orchestrator.printed = printed
        return orchestrator

    return factory
