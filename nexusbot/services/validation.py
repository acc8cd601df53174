"""
Sanity checks on the loaded configuration
"""

import re

from ..config.config import TOKEN_VARIABLES
from ..core.logging import get_logger
from ..utils.errors import ConfigurationError

logger = get_logger("validation")

_REPOSITORY_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


def collect_problems(config):
    """Return ``(errors, warnings)`` for ``config``"""
    errors = []
    warnings = []

    if not config.bot.token:
        errors.append(f"{' or '.join(TOKEN_VARIABLES)} is not set")

    prefix = config.bot.default_prefix
    if not prefix:
        errors.append("DEFAULT_PREFIX cannot be empty")
    elif len(prefix) > 5:
        errors.append("DEFAULT_PREFIX cannot be longer than 5 characters")

    if config.database.uri:
        if not config.database.uri.startswith(("mongodb://", "mongodb+srv://")):
            errors.append("MONGO_URI must start with mongodb:// or mongodb+srv://")
    else:
        warnings.append("MONGO_URI is not set; the database will not be initialized")

    if config.dashboard.enabled:
        if not 0 < config.dashboard.port < 65536:
            errors.append(f"DASHBOARD_PORT {config.dashboard.port} is out of range")
        if not config.dashboard.base_url:
            errors.append("DASHBOARD_BASE_URL cannot be empty when the dashboard is enabled")

    repository = config.updates.repository
    if repository and not _REPOSITORY_RE.match(repository):
        errors.append(f"UPDATE_CHECK_REPO must look like 'owner/name', got {repository!r}")

    return errors, warnings


def validate_configuration(config):
    """Raise ConfigurationError listing every problem found in ``config``"""
    errors, warnings = collect_problems(config)

    for warning in warnings:
        logger.warning(warning)

    if errors:
        raise ConfigurationError("; ".join(errors))

    logger.info("Configuration validated")
