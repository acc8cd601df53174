"""Small helpers shared across the bot."""

from __future__ import annotations

from datetime import timedelta

import pytest

from nexusbot.utils.constants import COLORS, STARTUP_BANNER
from nexusbot.utils.helpers import create_embed, format_duration, mask_token, maybe_await


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0 seconds"),
        (59, "59s"),
        (3725, "1h 2m"),
        (timedelta(days=8, hours=3), "1w 1d"),
    ],
)
def test_format_duration(seconds, expected: str) -> None:
    assert format_duration(seconds) == expected


@pytest.mark.parametrize(
    ("token", "expected"),
    [(None, "<unset>"), ("", "<unset>"), ("abc", "***"), ("abc123xyz", "abc123...")],
)
def test_mask_token(token, expected: str) -> None:
    assert mask_token(token) == expected


async def test_maybe_await_accepts_values_and_coroutines() -> None:
    async def value() -> int:
        return 2

    assert await maybe_await(1) == 1
    assert await maybe_await(value()) == 2


def test_create_embed_resolves_named_colors() -> None:
    embed = create_embed(title="Hi", color="error", timestamp=True)

    assert embed.color.value == COLORS["error"]
    assert embed.timestamp is not None


def test_banner_lines_keep_their_frame() -> None:
    banner = STARTUP_BANNER.format(version="v1.0.0", support="https://example.invalid")
    framed = [line for line in banner.splitlines() if line.startswith("║")]

    assert framed
    assert len({len(line) for line in framed}) == 1
