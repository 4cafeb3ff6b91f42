# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects exchanged between the resolver, builder and change-set stages."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class ToolInfo:
    """Resolved PMD distribution.

    Attributes:
        version: Concrete version string that was resolved.
        path: Distribution root containing the ``bin`` directory.
    """

    version: str
    path: Path


class ChangeStatus(str, Enum):
    """Enumerate file statuses reported by GitHub diff endpoints."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"

    @classmethod
    def from_raw(cls, raw: str) -> ChangeStatus | None:
        """Return the member matching ``raw`` or ``None`` when unknown."""

        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ChangeEntry:
    """One file row returned by a pull request or compare endpoint."""

    filename: str
    status: ChangeStatus | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> ChangeEntry:
        """Build an entry from a GitHub ``diff-entry`` JSON object."""

        return cls(
            filename=str(payload.get("filename", "")),
            status=ChangeStatus.from_raw(str(payload.get("status", ""))),
        )


@dataclass(frozen=True, slots=True)
class ExplicitPath:
    """Analyse every file below ``path``."""

    path: str


@dataclass(frozen=True, slots=True)
class FileList:
    """Analyse exactly the listed files."""

    files: tuple[str, ...]


SourceSelector: TypeAlias = ExplicitPath | FileList


@dataclass(frozen=True, slots=True)
class PmdCommand:
    """Executable and ordered arguments for one PMD invocation.

    Attributes:
        executable: Platform specific launcher path.
        subcommand: Launcher arguments preceding the PMD options.
        arguments: PMD options in the order they are passed.
    """

    executable: str
    subcommand: tuple[str, ...]
    arguments: tuple[str, ...]

    @property
    def argv(self) -> tuple[str, ...]:
        return (self.executable, *self.subcommand, *self.arguments)


__all__ = [
    "ChangeEntry",
    "ChangeStatus",
    "ExplicitPath",
    "FileList",
    "PmdCommand",
    "SourceSelector",
    "ToolInfo",
]
