# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for action input validation and runner environment loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pmdqa.config import ActionInputs, GitHubEvent, RunnerEnvironment
from pmdqa.errors import ConfigError


def _inputs(**overrides: object) -> ActionInputs:
    values: dict[str, object] = {"rulesets": "ruleset.xml"}
    values.update(overrides)
    return ActionInputs.parse(**values)


@pytest.mark.parametrize("version", ["latest", "6.40.0", "7.0.0-rc1", "7.0.0-SNAPSHOT"])
def test_valid_versions(version: str) -> None:
    assert _inputs(version=version).version == version


@pytest.mark.parametrize("version", ["", "6.40", "v6.40.0", "latest; rm -rf /", "6.40.0 "])
def test_invalid_versions(version: str) -> None:
    with pytest.raises(ConfigError, match="Invalid version"):
        _inputs(version=version)


def test_source_path_is_normalised() -> None:
    assert _inputs(source_path="./src/main/java/").source_path == "src/main/java"


@pytest.mark.parametrize("source_path", ["/etc", "src main", "src;ls", "src:java", "$HOME", "'src'"])
def test_invalid_source_paths(source_path: str) -> None:
    with pytest.raises(ConfigError, match="Invalid sourcePath"):
        _inputs(source_path=source_path)


def test_rulesets_spaces_are_removed() -> None:
    assert _inputs(rulesets="category/java/bestpractices.xml, ruleset.xml").rulesets == (
        "category/java/bestpractices.xml,ruleset.xml"
    )


@pytest.mark.parametrize("rulesets", ["a.xml;b.xml", "https://host/ruleset.xml", "$RULES", '"a.xml"'])
def test_invalid_rulesets(rulesets: str) -> None:
    with pytest.raises(ConfigError, match="Invalid rulesets"):
        _inputs(rulesets=rulesets)


@pytest.mark.parametrize("url", ["", "https://example.com/pmd.zip", "http://example.com/pmd.zip"])
def test_valid_download_urls(url: str) -> None:
    assert _inputs(download_url=url).download_url == url


def test_invalid_download_url() -> None:
    with pytest.raises(ConfigError, match="Invalid downloadUrl"):
        _inputs(download_url="ftp://example.com/pmd.zip")


@pytest.mark.parametrize("priority", ["0", "6", "high", ""])
def test_invalid_minimum_priority(priority: str) -> None:
    with pytest.raises(ConfigError, match="Invalid minimum priority"):
        _inputs(minimum_priority=priority)


def test_runner_environment_from_variables(tmp_path: Path) -> None:
    environment = RunnerEnvironment.from_environ(
        {
            "GITHUB_API_URL": "https://ghes.example.com/api/v3",
            "GITHUB_WORKSPACE": str(tmp_path),
            "RUNNER_TOOL_CACHE": str(tmp_path / "tools"),
            "RUNNER_TEMP": str(tmp_path / "temp"),
            "GITHUB_OUTPUT": str(tmp_path / "output"),
        },
    )

    assert environment.api_url == "https://ghes.example.com/api/v3"
    assert environment.workspace == tmp_path
    assert environment.tool_cache == tmp_path / "tools"
    assert environment.output_file == tmp_path / "output"


def test_runner_environment_defaults_to_public_api() -> None:
    environment = RunnerEnvironment.from_environ({})

    assert environment.api_url == "https://api.github.com"
    assert environment.output_file is None


def test_event_is_loaded_from_payload_file(tmp_path: Path) -> None:
    event_file = tmp_path / "event.json"
    event_file.write_text(json.dumps({"number": 7, "pull_request": {}}), encoding="utf-8")

    event = GitHubEvent.from_environ(
        {
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": str(event_file),
            "GITHUB_REPOSITORY": "pmd/pmd-github-action",
        },
    )

    assert event.name == "pull_request"
    assert event.payload["number"] == 7
    assert (event.owner, event.repo) == ("pmd", "pmd-github-action")


def test_event_with_malformed_repository(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="owner/repo"):
        GitHubEvent.from_environ({"GITHUB_EVENT_NAME": "push", "GITHUB_REPOSITORY": "no-slash"})


def test_event_with_unreadable_payload(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read event payload"):
        GitHubEvent.from_environ({"GITHUB_EVENT_NAME": "push", "GITHUB_EVENT_PATH": str(tmp_path / "missing.json")})
