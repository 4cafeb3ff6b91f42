# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Version policy describing how each PMD release expects to be invoked."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Final

from packaging.version import Version

from .errors import InvalidArgumentError

NEW_ARG_SYNTAX_VERSION: Final[Version] = Version("6.41.0")
NEXT_GEN_CLI_MAJOR: Final[int] = 7
WINDOWS_PLATFORM: Final[str] = "win32"

_PRERELEASE_IDENTIFIER: Final[str] = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
_SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_PRERELEASE_IDENTIFIER}(?:\.{_PRERELEASE_IDENTIFIER})*))?",
)


def parse_version(version: str) -> Version:
    """Return ``version`` as a comparable :class:`Version`.

    Every prerelease tag (``7.0.0-rc1``, ``7.0.0-SNAPSHOT``, ``6.41.0-1``) is
    mapped onto a development release of the same ``major.minor.patch`` so it
    sorts before the final release, as semantic versioning orders it.

    Args:
        version: Semantic version string such as ``6.55.0`` or ``7.0.0-rc1``.

    Returns:
        Version: Parsed version suitable for ordering comparisons.

    Raises:
        InvalidArgumentError: If ``version`` is not a semantic version.
    """

    match = _SEMVER_PATTERN.fullmatch(version.strip())
    if match is None:
        raise InvalidArgumentError(f"Invalid PMD version '{version}'")
    release = f"{match['major']}.{match['minor']}.{match['patch']}"
    if match["pre"]:
        return Version(f"{release}.dev0")
    return Version(release)


def is_semantic_version(version: str) -> bool:
    """Return ``True`` when ``version`` is a canonical semantic version such as ``7.0.0-rc1``."""

    return _SEMVER_PATTERN.fullmatch(version) is not None


def uses_new_arg_syntax(version: str) -> bool:
    """Return ``True`` when ``version`` accepts long-form options such as ``--no-cache``."""

    return parse_version(version) >= NEW_ARG_SYNTAX_VERSION


def is_next_gen_cli(version: str) -> bool:
    """Return ``True`` when ``version`` ships the subcommand based ``pmd check`` CLI."""

    return parse_version(version).major >= NEXT_GEN_CLI_MAJOR


@dataclass(frozen=True, slots=True)
class CliDialect:
    """Invocation conventions for one PMD version on one host platform.

    Attributes:
        new_arg_syntax: Whether long-form option spellings are understood.
        next_gen_cli: Whether the ``check`` subcommand entry point is used.
        windows: Whether the batch script launcher must be used.
    """

    new_arg_syntax: bool
    next_gen_cli: bool
    windows: bool

    @classmethod
    def select(cls, version: str, platform: str | None = None) -> CliDialect:
        """Return the dialect for ``version`` on ``platform`` (defaults to the host)."""

        host = sys.platform if platform is None else platform
        return cls(
            new_arg_syntax=uses_new_arg_syntax(version),
            next_gen_cli=is_next_gen_cli(version),
            windows=host == WINDOWS_PLATFORM,
        )

    @property
    def executable_parts(self) -> tuple[str, ...]:
        """Return the executable location relative to the distribution root."""

        if self.windows:
            return ("bin", "pmd.bat")
        if self.next_gen_cli:
            return ("bin", "pmd")
        return ("bin", "run.sh")

    @property
    def subcommand(self) -> tuple[str, ...]:
        """Return the arguments that immediately follow the executable."""

        if self.next_gen_cli:
            return ("check", "--no-progress")
        if self.windows:
            return ()
        return ("pmd",)

    @property
    def no_cache_flag(self) -> str:
        return "--no-cache" if self.new_arg_syntax else "-no-cache"

    @property
    def file_list_flag(self) -> str:
        return "--file-list" if self.new_arg_syntax else "-filelist"


__all__ = [
    "NEW_ARG_SYNTAX_VERSION",
    "NEXT_GEN_CLI_MAJOR",
    "WINDOWS_PLATFORM",
    "CliDialect",
    "is_next_gen_cli",
    "is_semantic_version",
    "parse_version",
    "uses_new_arg_syntax",
]
