# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_runner_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test as if outside GitHub Actions with debug output disabled."""

    for variable in (
        "GITHUB_ACTIONS",
        "RUNNER_DEBUG",
        "GITHUB_API_URL",
        "GITHUB_EVENT_NAME",
        "GITHUB_EVENT_PATH",
        "GITHUB_REPOSITORY",
        "GITHUB_OUTPUT",
        "GITHUB_WORKSPACE",
        "RUNNER_TOOL_CACHE",
        "RUNNER_TEMP",
    ):
        monkeypatch.delenv(variable, raising=False)
