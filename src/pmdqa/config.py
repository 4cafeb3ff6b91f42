# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validated action inputs and the GitHub runner environment."""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .github import PUBLIC_GITHUB_API_URL
from .versioning import is_semantic_version

MINIMUM_PRIORITIES: Final[tuple[str, ...]] = ("1", "2", "3", "4", "5")
_SOURCE_PATH_FORBIDDEN: Final[re.Pattern[str]] = re.compile(r"[ ;:\"'$]")
_RULESETS_FORBIDDEN: Final[re.Pattern[str]] = re.compile(r"[;:\"'$]")
_DOWNLOAD_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://")


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    message = str(errors[0].get("msg", exc))
    return message.removeprefix("Value error, ")


class ActionInputs(BaseModel):
    """User supplied inputs of the PMD action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: str = "latest"
    download_url: str = ""
    source_path: str = "."
    rulesets: str
    analyze_modified_files_only: bool = True
    minimum_priority: str = "5"
    token: str = ""

    @field_validator("version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        if value == "latest" or is_semantic_version(value):
            return value
        raise ValueError("Invalid version")

    @field_validator("source_path")
    @classmethod
    def _validate_source_path(cls, value: str) -> str:
        normalized = os.path.normpath(value)
        if os.path.isabs(normalized) or _SOURCE_PATH_FORBIDDEN.search(normalized):
            raise ValueError("Invalid sourcePath")
        return normalized

    @field_validator("rulesets")
    @classmethod
    def _validate_rulesets(cls, value: str) -> str:
        if _RULESETS_FORBIDDEN.search(value):
            raise ValueError("Invalid rulesets")
        return value.replace(" ", "")

    @field_validator("download_url")
    @classmethod
    def _validate_download_url(cls, value: str) -> str:
        if value == "" or _DOWNLOAD_URL_PATTERN.match(value):
            return value
        raise ValueError("Invalid downloadUrl")

    @field_validator("minimum_priority")
    @classmethod
    def _validate_minimum_priority(cls, value: str) -> str:
        if value in MINIMUM_PRIORITIES:
            return value
        raise ValueError("Invalid minimum priority")

    @classmethod
    def parse(cls, **values: Any) -> ActionInputs:
        """Validate ``values`` and return the inputs.

        Raises:
            ConfigError: If any input is invalid.
        """

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(_first_error_message(exc)) from exc


class RunnerEnvironment(BaseModel):
    """Locations and endpoints supplied by the hosting runner."""

    model_config = ConfigDict(frozen=True)

    api_url: str = PUBLIC_GITHUB_API_URL
    workspace: Path = Field(default_factory=Path.cwd)
    tool_cache: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "pmdqa" / "tool-cache")
    temp_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "pmdqa" / "temp")
    output_file: Path | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> RunnerEnvironment:
        """Build the environment from ``GITHUB_*`` and ``RUNNER_*`` variables."""

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field_name, variable in (
            ("api_url", "GITHUB_API_URL"),
            ("workspace", "GITHUB_WORKSPACE"),
            ("tool_cache", "RUNNER_TOOL_CACHE"),
            ("temp_dir", "RUNNER_TEMP"),
            ("output_file", "GITHUB_OUTPUT"),
        ):
            raw = env.get(variable)
            if raw:
                values[field_name] = raw
        return cls(**values)


class GitHubEvent(BaseModel):
    """The workflow event that triggered the run."""

    model_config = ConfigDict(frozen=True)

    name: str
    payload: dict[str, Any] = Field(default_factory=dict)
    owner: str = ""
    repo: str = ""

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> GitHubEvent:
        """Load the event named by ``GITHUB_EVENT_NAME`` from ``GITHUB_EVENT_PATH``.

        Raises:
            ConfigError: If the event payload cannot be read or
                ``GITHUB_REPOSITORY`` is not ``owner/repo``.
        """

        env = os.environ if environ is None else environ
        payload: dict[str, Any] = {}
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path:
            try:
                loaded = json.loads(Path(event_path).read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise ConfigError(f"Unable to read event payload {event_path}: {exc}") from exc
            if isinstance(loaded, dict):
                payload = loaded
        owner, repo = "", ""
        repository = env.get("GITHUB_REPOSITORY", "")
        if repository:
            owner, sep, repo = repository.partition("/")
            if not sep or not owner or not repo:
                raise ConfigError(f"GITHUB_REPOSITORY must be 'owner/repo', got '{repository}'")
        return cls(name=env.get("GITHUB_EVENT_NAME", ""), payload=payload, owner=owner, repo=repo)


__all__ = ["MINIMUM_PRIORITIES", "ActionInputs", "GitHubEvent", "RunnerEnvironment"]
