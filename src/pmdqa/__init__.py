# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve, configure and run PMD for continuous integration workflows."""

from __future__ import annotations

from .changes import UNSUPPORTED, resolve_changed_files
from .command import build_command
from .errors import (
    ConfigError,
    GitHubApiError,
    InvalidArgumentError,
    PaginationFailure,
    PmdActionError,
    ResolutionFailure,
)
from .models import ChangeEntry, ChangeStatus, ExplicitPath, FileList, PmdCommand, ToolInfo
from .releases import ArtifactResolver
from .versioning import CliDialect, is_next_gen_cli, uses_new_arg_syntax

__all__ = [
    "UNSUPPORTED",
    "ArtifactResolver",
    "ChangeEntry",
    "ChangeStatus",
    "CliDialect",
    "ConfigError",
    "ExplicitPath",
    "FileList",
    "GitHubApiError",
    "InvalidArgumentError",
    "PaginationFailure",
    "PmdActionError",
    "PmdCommand",
    "ResolutionFailure",
    "ToolInfo",
    "build_command",
    "is_next_gen_cli",
    "resolve_changed_files",
    "uses_new_arg_syntax",
]
