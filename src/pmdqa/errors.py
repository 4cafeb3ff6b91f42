# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the PMD action pipeline."""

from __future__ import annotations


class PmdActionError(Exception):
    """Base class for failures raised by :mod:`pmdqa`."""


class InvalidArgumentError(PmdActionError):
    """Raised when caller supplied inputs conflict or cannot be interpreted."""


class ConfigError(PmdActionError):
    """Raised when action inputs fail validation."""


class GitHubApiError(PmdActionError):
    """Raised when a GitHub REST request fails at the transport or HTTP level."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResolutionFailure(PmdActionError):
    """Raised when a PMD distribution cannot be located, downloaded or extracted."""


class PaginationFailure(PmdActionError):
    """Raised when a page of changed files cannot be retrieved."""

    def __init__(self, message: str, *, page: int) -> None:
        super().__init__(message)
        self.page = page


__all__ = [
    "ConfigError",
    "GitHubApiError",
    "InvalidArgumentError",
    "PaginationFailure",
    "PmdActionError",
    "ResolutionFailure",
]
