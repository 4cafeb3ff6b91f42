# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose the PMD command line for a resolved distribution."""

from __future__ import annotations

from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Final

from .logging import info
from .models import ExplicitPath, FileList, PmdCommand, SourceSelector, ToolInfo
from .versioning import CliDialect

FILE_LIST_NAME: Final[str] = "pmd.filelist"


def write_file_list(files: tuple[str, ...] | list[str], working_dir: Path) -> Path:
    """Persist ``files`` as the comma separated list consumed by ``--file-list``.

    Args:
        files: Paths to analyse, relative to the repository root.
        working_dir: Directory receiving the file list.

    Returns:
        Path: Location of the written file list.
    """

    destination = working_dir / FILE_LIST_NAME
    destination.write_text(",".join(files), encoding="utf-8")
    return destination


def _executable(tool_info: ToolInfo, dialect: CliDialect) -> str:
    flavour: type[PurePath] = PureWindowsPath if dialect.windows else PurePosixPath
    return str(flavour(str(tool_info.path), *dialect.executable_parts))


def _source_arguments(source: SourceSelector, dialect: CliDialect, working_dir: Path, version: str) -> list[str]:
    if isinstance(source, FileList):
        file_list = write_file_list(source.files, working_dir)
        info(f"Running PMD {version} on {len(source.files)} modified files...")
        return [dialect.file_list_flag, str(file_list)]
    if isinstance(source, ExplicitPath):
        info(f"Running PMD {version} on all files in path {source.path}...")
        return ["-d", source.path]
    raise TypeError(f"unsupported source selector: {source!r}")


def build_command(
    tool_info: ToolInfo,
    source: SourceSelector,
    ruleset: str,
    report_format: str,
    report_file: str,
    minimum_priority: str,
    platform: str | None = None,
    *,
    working_dir: Path = Path(),
) -> PmdCommand:
    """Return the executable and arguments used to run PMD.

    Args:
        tool_info: Resolved PMD distribution.
        source: Directory or explicit file list to analyse.
        ruleset: Comma separated ruleset references.
        report_format: PMD renderer name, e.g. ``sarif``.
        report_file: Report destination.
        minimum_priority: Lowest rule priority to report (``1`` to ``5``).
        platform: Host platform identifier, defaults to :data:`sys.platform`.
        working_dir: Directory where a file list is written when required.

    Returns:
        PmdCommand: Launcher path, subcommand prefix and ordered options.
    """

    dialect = CliDialect.select(tool_info.version, platform)
    arguments = [dialect.no_cache_flag]
    arguments.extend(_source_arguments(source, dialect, working_dir, tool_info.version))
    arguments.extend(
        [
            "-f",
            report_format,
            "-R",
            ruleset,
            "-r",
            report_file,
            "--minimum-priority",
            minimum_priority,
        ],
    )
    return PmdCommand(
        executable=_executable(tool_info, dialect),
        subcommand=dialect.subcommand,
        arguments=tuple(arguments),
    )


__all__ = ["FILE_LIST_NAME", "build_command", "write_file_list"]
