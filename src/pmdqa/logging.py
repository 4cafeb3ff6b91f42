# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers rendered through Rich or GitHub workflow commands."""

from __future__ import annotations

import os
import sys
from functools import cache
from typing import Final, Literal

from rich.console import Console
from rich.text import Text

WorkflowCommand = Literal["debug", "notice", "warning", "error"]

_COMMAND_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("%", "%25"),
    ("\r", "%0D"),
    ("\n", "%0A"),
)


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def in_github_actions() -> bool:
    """Return ``True`` when running inside a GitHub Actions job."""

    return os.environ.get("GITHUB_ACTIONS") == "true"


def is_debug() -> bool:
    """Return ``True`` when step debug logging was requested for the runner."""

    return os.environ.get("RUNNER_DEBUG") == "1"


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by colour and emoji settings."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return a console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty()
        key = (color, emoji, tty)
        if key not in self._cache:
            self._cache[key] = Console(
                color_system="auto" if color and tty else None,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                highlight=False,
            )
        return self._cache[key]


@cache
def get_console_manager() -> RichConsoleManager:
    """Return the process wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


def escape_command_data(message: str) -> str:
    """Escape ``message`` so it survives as workflow command data."""

    escaped = message
    for raw, replacement in _COMMAND_ESCAPES:
        escaped = escaped.replace(raw, replacement)
    return escaped


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def _workflow_command(command: WorkflowCommand, msg: str) -> None:
    console = get_console_manager().get(color=False, emoji=False)
    console.print(Text(f"::{command}::{escape_command_data(msg)}"))


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _print_line(f"{'ℹ️ ' if use_emoji else ''}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{'✅ ' if use_emoji else ''}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a warning, as a workflow annotation when running under GitHub Actions.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    if in_github_actions():
        _workflow_command("warning", msg)
        return
    _print_line(f"{'⚠️ ' if use_emoji else ''}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an error message, as a workflow annotation under GitHub Actions."""

    if in_github_actions():
        _workflow_command("error", msg)
        return
    _print_line(f"{'❌ ' if use_emoji else ''}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def debug(msg: str) -> None:
    """Emit a debug message.

    GitHub Actions only displays ``::debug::`` lines when step debugging is
    enabled, so they are always forwarded there. Elsewhere the message is
    printed only when ``RUNNER_DEBUG=1``.
    """

    if in_github_actions():
        _workflow_command("debug", msg)
        return
    if is_debug():
        _print_line(msg, style="dim", use_emoji=False)


__all__ = [
    "RichConsoleManager",
    "debug",
    "detect_tty",
    "escape_command_data",
    "fail",
    "get_console_manager",
    "in_github_actions",
    "info",
    "is_debug",
    "ok",
    "warn",
]
