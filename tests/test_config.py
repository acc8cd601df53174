"""Environment-backed configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from nexusbot.config.config import (
    PACKAGE_ROOT,
    BranchingPolicy,
    Config,
    DatabaseFailurePolicy,
    Environment,
    ValidationFailurePolicy,
    load_config,
)
from nexusbot.utils.errors import ConfigurationError


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("COMMANDS_DIR")
    monkeypatch.delenv("EVENTS_DIR")

    config = Config()

    assert config.environment is Environment.DEVELOPMENT
    assert config.is_development
    assert config.bot.token is None
    assert config.bot.token_source is None
    assert config.bot.default_prefix == "!"
    assert config.database.uri is None
    assert config.dashboard.enabled is False
    assert config.updates.repository is None
    assert config.startup.on_validation_failure is ValidationFailurePolicy.CONTINUE
    assert config.startup.db_init_failure is DatabaseFailurePolicy.WARN
    assert config.startup.branching is BranchingPolicy.INDEPENDENT
    assert config.startup.terminate_on_uncaught is False
    assert config.paths.commands_dir == PACKAGE_ROOT / "commands"
    assert config.paths.events_dir == PACKAGE_ROOT / "events"


def test_primary_token_wins_over_alias(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "primary")
    monkeypatch.setenv("DISCORD_TOKEN", "alias")

    config = Config()

    assert config.bot.token == "primary"
    assert config.bot.token_source == "BOT_TOKEN"


def test_alias_token_used_when_primary_empty(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "")
    monkeypatch.setenv("DISCORD_TOKEN", "alias")

    config = Config()

    assert config.bot.token == "alias"
    assert config.bot.token_source == "DISCORD_TOKEN"


@pytest.mark.parametrize(("raw", "expected"), [("true", True), ("YES", True), ("1", True), ("off", False), ("", False)])
def test_dashboard_flag(monkeypatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("DASHBOARD_ENABLED", raw)

    assert Config().dashboard.enabled is expected


def test_policies_are_parsed(monkeypatch) -> None:
    monkeypatch.setenv("ON_VALIDATION_FAILURE", "EXIT")
    monkeypatch.setenv("DB_INIT_FAILURE", "fatal")
    monkeypatch.setenv("STARTUP_BRANCHING", "exclusive")
    monkeypatch.setenv("TERMINATE_ON_UNCAUGHT", "true")
    monkeypatch.setenv("LOGIN_TIMEOUT", "2.5")

    startup = Config().startup

    assert startup.on_validation_failure is ValidationFailurePolicy.EXIT
    assert startup.db_init_failure is DatabaseFailurePolicy.FATAL
    assert startup.branching is BranchingPolicy.EXCLUSIVE
    assert startup.terminate_on_uncaught is True
    assert startup.login_timeout == 2.5


def test_invalid_policy_falls_back_and_is_recorded(monkeypatch) -> None:
    monkeypatch.setenv("DB_INIT_FAILURE", "maybe")

    config = Config()

    assert config.startup.db_init_failure is DatabaseFailurePolicy.WARN
    assert len(config.problems) == 1
    assert isinstance(config.problems[0], ConfigurationError)
    assert "DB_INIT_FAILURE='maybe'" in str(config.problems[0])


@pytest.mark.parametrize("raw", ["", "   "])
def test_blank_numbers_use_defaults(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("DASHBOARD_PORT", raw)
    monkeypatch.setenv("UPDATE_CHECK_TIMEOUT", raw)
    monkeypatch.setenv("MAX_MESSAGES", raw)

    config = Config()

    assert config.dashboard.port == 8080
    assert config.startup.update_check_timeout == 10.0
    assert config.bot.max_messages == 1000
    assert config.problems == []


def test_malformed_numbers_use_defaults_and_are_recorded(monkeypatch) -> None:
    monkeypatch.setenv("DASHBOARD_PORT", "eighty")
    monkeypatch.setenv("LOGIN_TIMEOUT", "1m")

    config = Config()

    assert config.dashboard.port == 8080
    assert config.startup.login_timeout == 60.0
    assert [str(problem) for problem in config.problems] == [
        "DASHBOARD_PORT='eighty' is not a number, using 8080",
        "LOGIN_TIMEOUT='1m' is not a number, using 60.0",
    ]


def test_environment_is_case_insensitive(monkeypatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "Production")

    config = Config()

    assert config.environment is Environment.PRODUCTION
    assert not config.is_development


def test_owner_ids_ignore_garbage(monkeypatch) -> None:
    monkeypatch.setenv("OWNERS", "123, abc,456,")

    assert Config().owner_ids == [123, 456]


def test_load_config_reads_dotenv(tmp_path: Path) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("BOT_TOKEN=from-dotenv\nDEFAULT_PREFIX=?\n", encoding="utf-8")

    config = load_config(dotenv)

    assert config.bot.token == "from-dotenv"
    assert config.bot.default_prefix == "?"


def test_load_config_without_dotenv_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "from-env")

    config = load_config(tmp_path / "missing.env")

    assert config.bot.token == "from-env"
