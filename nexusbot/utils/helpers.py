"""
Helper functions and utilities
"""

import inspect
from datetime import datetime, timezone, timedelta
from typing import Any, Optional, Union

import discord

from .constants import COLORS


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged

    Lets collaborators be plain functions or coroutine functions.
    """
    if inspect.isawaitable(value):
        return await value
    return value


def format_duration(seconds: Union[int, float, timedelta]) -> str:
    """
    Format a duration in seconds to a human-readable string

    Args:
        seconds: Duration in seconds or timedelta object

    Returns:
        Formatted duration string (e.g., "1h 30m")
    """
    if isinstance(seconds, timedelta):
        seconds = int(seconds.total_seconds())

    if seconds == 0:
        return "0 seconds"

    seconds = int(abs(seconds))

    units = [
        ("year", 31536000),
        ("month", 2592000),
        ("week", 604800),
        ("day", 86400),
        ("hour", 3600),
        ("minute", 60),
        ("second", 1),
    ]

    short_forms = {
        "year": "y",
        "month": "mo",
        "week": "w",
        "day": "d",
        "hour": "h",
        "minute": "m",
        "second": "s",
    }

    parts = []
    for unit_name, unit_seconds in units:
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            seconds %= unit_seconds
            parts.append(f"{count}{short_forms[unit_name]}")

            # Only show top 2 units for readability
            if len(parts) >= 2:
                break

    return " ".join(parts)


def mask_token(token: Optional[str], visible: int = 6) -> str:
    """Hide all but the first ``visible`` characters of a secret"""
    if not token:
        return "<unset>"
    if len(token) <= visible:
        return "*" * len(token)
    return token[:visible] + "..."


def create_embed(
    title: Optional[str] = None,
    description: Optional[str] = None,
    color: Union[int, str] = "primary",
    timestamp: bool = False,
    **kwargs,
) -> discord.Embed:
    """
    Create a standardized embed with consistent styling

    Args:
        title: Embed title
        description: Embed description
        color: Color name from COLORS dict or hex value
        timestamp: Whether to add current timestamp
        **kwargs: Additional embed parameters

    Returns:
        Configured Discord embed
    """
    if isinstance(color, str):
        color = COLORS.get(color, COLORS["primary"])

    embed = discord.Embed(title=title, description=description, color=color, **kwargs)

    if timestamp:
        embed.timestamp = datetime.now(timezone.utc)

    return embed
