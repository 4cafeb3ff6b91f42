# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for resolving PMD distributions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fakes import FakeToolCache

from pmdqa.errors import GitHubApiError, InvalidArgumentError, ResolutionFailure
from pmdqa.models import ToolInfo
from pmdqa.releases import ArtifactResolver, download_url_for, registry_for, version_from_release

DOWNLOAD_ROOT = "https://github.com/pmd/pmd/releases/download/pmd_releases"


def _release(version: str, asset_name: str | None = None) -> dict[str, Any]:
    name = asset_name or f"pmd-bin-{version}.zip"
    return {
        "name": f"PMD {version}",
        "tag_name": f"pmd_releases/{version}",
        "assets": [
            {"name": f"pmd-src-{version}.zip", "browser_download_url": f"{DOWNLOAD_ROOT}/{version}/pmd-src-{version}.zip"},
            {"name": name, "browser_download_url": f"{DOWNLOAD_ROOT}/{version}/{name}"},
        ],
    }


class FakeRegistry:
    instances: list[FakeRegistry] = []

    def __init__(self, *, base_url: str, token: str | None) -> None:
        self.base_url = base_url
        self.token = token
        self.requests: list[tuple[str, ...]] = []
        FakeRegistry.instances.append(self)

    def get_latest_release(self, owner: str, repo: str) -> dict[str, Any]:
        self.requests.append(("latest", owner, repo))
        return _release("6.40.0")

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> dict[str, Any]:
        self.requests.append(("tag", owner, repo, tag))
        version = tag.removeprefix("pmd_releases/")
        if version.startswith("7."):
            return _release(version, f"pmd-dist-{version}-bin.zip")
        return _release(version)


class FailingRegistry(FakeRegistry):
    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> dict[str, Any]:
        raise GitHubApiError("HTTP 404", status_code=404)


@pytest.fixture(autouse=True)
def _reset_registries() -> None:
    FakeRegistry.instances.clear()


def test_latest_release_is_downloaded_and_cached(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    tool_info = resolver.resolve("latest", "my_test_token")

    cached = tmp_path / "cache" / "pmd" / "6.40.0" / "x64"
    assert tool_info == ToolInfo(version="6.40.0", path=cached / "pmd-bin-6.40.0")
    assert tool_info.path.is_dir()
    assert cache.downloads == [f"{DOWNLOAD_ROOT}/6.40.0/pmd-bin-6.40.0.zip"]
    (registry,) = FakeRegistry.instances
    assert registry.token == "my_test_token"
    assert registry.requests == [("latest", "pmd", "pmd")]


def test_custom_api_url_queries_public_registry_without_token(tmp_path: Path) -> None:
    resolver = ArtifactResolver(
        FakeToolCache(tmp_path),
        api_url="https://api.example.com",
        registry_factory=FakeRegistry,
    )

    tool_info = resolver.resolve("latest", "my_test_token")

    assert tool_info.version == "6.40.0"
    (registry,) = FakeRegistry.instances
    assert registry.base_url == "https://api.github.com"
    assert registry.token is None


def test_specific_version_uses_release_tag(tmp_path: Path) -> None:
    resolver = ArtifactResolver(FakeToolCache(tmp_path), registry_factory=FakeRegistry)

    tool_info = resolver.resolve("6.39.0", "my_test_token")

    assert tool_info.version == "6.39.0"
    assert FakeRegistry.instances[0].requests == [("tag", "pmd", "pmd", "pmd_releases/6.39.0")]


def test_dist_asset_naming_is_recognised(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    tool_info = resolver.resolve("7.0.0-rc1", "my_test_token")

    assert cache.downloads == [f"{DOWNLOAD_ROOT}/7.0.0-rc1/pmd-dist-7.0.0-rc1-bin.zip"]
    assert tool_info.path.name == "pmd-bin-7.0.0-rc1"
    assert tool_info.path.is_dir()


def test_cached_version_skips_network(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    first = resolver.resolve("6.39.0", "my_test_token")
    second = resolver.resolve("6.39.0", "my_test_token")

    assert first == second
    assert len(cache.downloads) == 1
    assert len(FakeRegistry.instances) == 1


def test_latest_reuses_cached_concrete_version(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    resolver.resolve("6.40.0", "token")
    tool_info = resolver.resolve("latest", "token")

    assert tool_info.version == "6.40.0"
    assert len(cache.downloads) == 1
    assert ("pmd", "latest") in cache.find_calls


def test_download_url_with_latest_is_rejected_before_network(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    with pytest.raises(InvalidArgumentError, match="Can't combine version=latest"):
        resolver.resolve("latest", "token", "https://example.com/pmd.zip")

    assert cache.downloads == []
    assert cache.find_calls == []
    assert FakeRegistry.instances == []


def test_download_url_uses_first_archive_entry(tmp_path: Path) -> None:
    cache = FakeToolCache(tmp_path)
    resolver = ArtifactResolver(cache, registry_factory=FakeRegistry)

    tool_info = resolver.resolve("7.0.0-SNAPSHOT", "token", "https://sourceforge.net/pmd-bin-7.0.0-SNAPSHOT.zip")

    assert tool_info.version == "7.0.0-SNAPSHOT"
    assert tool_info.path.name == "pmd-bin-7.0.0-SNAPSHOT"
    assert cache.downloads == ["https://sourceforge.net/pmd-bin-7.0.0-SNAPSHOT.zip"]
    assert FakeRegistry.instances == []


def test_empty_download_url_falls_back_to_release(tmp_path: Path) -> None:
    resolver = ArtifactResolver(FakeToolCache(tmp_path), registry_factory=FakeRegistry)

    tool_info = resolver.resolve("latest", "token", "")

    assert tool_info.version == "6.40.0"


def test_registry_errors_become_resolution_failures(tmp_path: Path) -> None:
    resolver = ArtifactResolver(FakeToolCache(tmp_path), registry_factory=FailingRegistry)

    with pytest.raises(ResolutionFailure) as excinfo:
        resolver.resolve("6.39.0", "token")

    assert isinstance(excinfo.value.__cause__, GitHubApiError)


def test_missing_binary_asset_is_a_resolution_failure() -> None:
    release = {"tag_name": "pmd_releases/6.39.0", "assets": [{"name": "pmd-src-6.39.0.zip"}]}

    with pytest.raises(ResolutionFailure):
        download_url_for(release)


def test_version_is_taken_from_release_tag() -> None:
    assert version_from_release({"tag_name": "pmd_releases/6.55.0"}) == "6.55.0"


def test_registry_for_trailing_slash_public_url_uses_token() -> None:
    registry = registry_for("https://api.github.com/", "secret", factory=FakeRegistry)

    assert isinstance(registry, FakeRegistry)
    assert registry.token == "secret"
