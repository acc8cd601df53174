"""
Release check against the project's GitHub repository
"""

import re
from typing import Optional, Tuple

import aiohttp

from .. import __version__
from ..core.logging import get_logger

logger = get_logger("updates")

_VERSION_RE = re.compile(r"(\d+(?:\.\d+)*)")


def parse_version(tag: str) -> Tuple[int, ...]:
    """``"v1.2.3"`` -> ``(1, 2, 3)``; anything unparsable is ``()``"""
    match = _VERSION_RE.search(tag or "")
    if not match:
        return ()
    return tuple(int(part) for part in match.group(1).split("."))


def is_newer(latest: str, current: str) -> bool:
    latest_version, current_version = parse_version(latest), parse_version(current)
    if not latest_version or not current_version:
        return False
    # Pad so 1.2 and 1.2.0 compare equal
    width = max(len(latest_version), len(current_version))
    latest_version += (0,) * (width - len(latest_version))
    current_version += (0,) * (width - len(current_version))
    return latest_version > current_version


async def fetch_latest_release(
    session: aiohttp.ClientSession, api_url: str, repository: str
) -> Optional[str]:
    url = f"{api_url.rstrip('/')}/repos/{repository}/releases/latest"
    async with session.get(url, headers={"Accept": "application/vnd.github+json"}) as resp:
        if resp.status == 404:
            return None
        resp.raise_for_status()
        data = await resp.json()
    return data.get("tag_name")


async def check_for_updates(config, session: Optional[aiohttp.ClientSession] = None) -> bool:
    """Log whether a newer release is available

    Returns True when an update is available.
    """
    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession()

    try:
        latest = await fetch_latest_release(
            session, config.updates.api_url, config.updates.repository
        )
    finally:
        if owns_session:
            await session.close()

    if latest is None:
        logger.info(f"No releases published for {config.updates.repository}")
        return False

    if is_newer(latest, __version__):
        logger.warning(
            f"Update available: {latest} (running {__version__}). "
            f"See https://github.com/{config.updates.repository}/releases/latest"
        )
        return True

    logger.info(f"You are running the latest version ({__version__})")
    return False
