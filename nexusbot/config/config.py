import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..utils.errors import ConfigurationError

PACKAGE_ROOT = Path(__file__).resolve().parent.parent

TRUTHY = {"1", "true", "yes", "on"}

# Checked in order; the first non-empty one supplies the token
TOKEN_VARIABLES = ("BOT_TOKEN", "DISCORD_TOKEN")


class Environment(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ValidationFailurePolicy(Enum):
    CONTINUE = "continue"
    EXIT = "exit"


class DatabaseFailurePolicy(Enum):
    WARN = "warn"
    FATAL = "fatal"


class BranchingPolicy(Enum):
    INDEPENDENT = "independent"
    EXCLUSIVE = "exclusive"


def _first_env(*names: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, name)`` for the first non-empty variable in ``names``"""
    for name in names:
        value = os.getenv(name)
        if value:
            return value, name
    return None, None


def _flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


def _policy(enum_cls, name: str, default: Enum, problems: List[ConfigurationError]):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        problems.append(
            ConfigurationError(f"{name}={raw!r} is not valid (expected one of: {choices})")
        )
        return default


def _number(cast, name: str, default, problems: List[ConfigurationError]):
    """Parse a numeric variable; blank or malformed values fall back to ``default``"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        problems.append(
            ConfigurationError(f"{name}={raw!r} is not a number, using {default}")
        )
        return default


class Config:
    def __init__(self):
        # Malformed optional settings; the validation step reports these
        self.problems: List[ConfigurationError] = []
        problems = self.problems

        self.environment = _policy(
            Environment, "ENVIRONMENT", Environment.DEVELOPMENT, problems
        )
        self.is_development = self.environment == Environment.DEVELOPMENT

        class Bot:
            def __init__(self):
                # BOT_TOKEN is preferred, DISCORD_TOKEN is accepted as an alias
                self.token, self.token_source = _first_env(*TOKEN_VARIABLES)
                self.default_prefix = os.getenv("DEFAULT_PREFIX", "!")
                self.max_messages = _number(int, "MAX_MESSAGES", 1000, problems)

        class Database:
            def __init__(self):
                self.uri, _ = _first_env("MONGO_URI", "MONGO_CONNECTION")
                self.name = os.getenv("DATABASE_NAME", "nexusbot")
                self.server_selection_timeout = _number(
                    int, "SERVER_SELECTION_TIMEOUT_MS", 5000, problems
                )
                self.connection_timeout = _number(
                    int, "CONNECTION_TIMEOUT_MS", 10000, problems
                )
                self.max_pool_size = _number(int, "MAX_POOL_SIZE", 100, problems)
                self.min_pool_size = _number(int, "MIN_POOL_SIZE", 10, problems)

        class Dashboard:
            def __init__(self):
                self.enabled = _flag("DASHBOARD_ENABLED")
                self.host = os.getenv("DASHBOARD_HOST", "0.0.0.0")
                self.port = _number(int, "DASHBOARD_PORT", 8080, problems)
                self.base_url = os.getenv(
                    "DASHBOARD_BASE_URL", f"http://localhost:{self.port}"
                )

        class Updates:
            def __init__(self):
                self.repository = os.getenv("UPDATE_CHECK_REPO") or None
                self.api_url = os.getenv("UPDATE_CHECK_API", "https://api.github.com")

        class Startup:
            def __init__(self):
                self.on_validation_failure = _policy(
                    ValidationFailurePolicy,
                    "ON_VALIDATION_FAILURE",
                    ValidationFailurePolicy.CONTINUE,
                    problems,
                )
                self.db_init_failure = _policy(
                    DatabaseFailurePolicy,
                    "DB_INIT_FAILURE",
                    DatabaseFailurePolicy.WARN,
                    problems,
                )
                self.branching = _policy(
                    BranchingPolicy,
                    "STARTUP_BRANCHING",
                    BranchingPolicy.INDEPENDENT,
                    problems,
                )
                self.terminate_on_uncaught = _flag("TERMINATE_ON_UNCAUGHT")

                # Seconds
                self.update_check_timeout = _number(
                    float, "UPDATE_CHECK_TIMEOUT", 10.0, problems
                )
                self.database_timeout = _number(
                    float, "DATABASE_INIT_TIMEOUT", 30.0, problems
                )
                self.dashboard_timeout = _number(
                    float, "DASHBOARD_LAUNCH_TIMEOUT", 30.0, problems
                )
                self.login_timeout = _number(float, "LOGIN_TIMEOUT", 60.0, problems)

        class Paths:
            def __init__(self):
                commands_dir = os.getenv("COMMANDS_DIR")
                events_dir = os.getenv("EVENTS_DIR")
                self.commands_dir = (
                    Path(commands_dir) if commands_dir else PACKAGE_ROOT / "commands"
                )
                self.events_dir = Path(events_dir) if events_dir else PACKAGE_ROOT / "events"

        class Logging:
            def __init__(self):
                self.level = os.getenv("LOG_LEVEL", "INFO").upper()
                self.file_path = os.getenv("LOG_FILE_PATH", "logs/nexusbot.log")
                self.max_file_size = _number(
                    int, "LOG_MAX_FILE_SIZE", 10485760, problems
                )  # 10MB
                self.backup_count = _number(int, "LOG_BACKUP_COUNT", 5, problems)

        # Parse owner IDs
        owners_str = os.getenv("OWNERS", "")
        self.owner_ids = (
            [int(id.strip()) for id in owners_str.split(",") if id.strip().isdigit()]
            if owners_str
            else []
        )

        self.bot = Bot()
        self.database = Database()
        self.dashboard = Dashboard()
        self.updates = Updates()
        self.startup = Startup()
        self.paths = Paths()
        self.logging = Logging()


def load_config(dotenv_path=None) -> Config:
    """Load the ``.env`` file (when there is one) and build a fresh Config"""
    from dotenv import load_dotenv

    load_dotenv(dotenv_path=dotenv_path)
    return Config()
