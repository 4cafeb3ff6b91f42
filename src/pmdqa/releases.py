# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve a requested PMD version to a cached, extracted distribution."""

from __future__ import annotations

import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final, Protocol

import requests

from .errors import GitHubApiError, InvalidArgumentError, ResolutionFailure
from .github import PUBLIC_GITHUB_API_URL, GitHubClient
from .logging import debug, info
from .models import ToolInfo

PMD_TOOL_NAME: Final[str] = "pmd"
PMD_OWNER: Final[str] = "pmd"
PMD_REPO: Final[str] = "pmd"
RELEASE_TAG_PREFIX: Final[str] = "pmd_releases/"
LATEST: Final[str] = "latest"

_RESOLUTION_ERRORS: Final[tuple[type[BaseException], ...]] = (
    GitHubApiError,
    requests.RequestException,
    zipfile.BadZipFile,
    OSError,
)


class ReleaseRegistry(Protocol):
    """Release lookups consumed from the GitHub releases API."""

    def get_latest_release(self, owner: str, repo: str) -> Mapping[str, Any]: ...

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Mapping[str, Any]: ...


class ArtifactCache(Protocol):
    """Download and cache operations provided by :class:`pmdqa.cache.ToolCache`."""

    def find(self, tool: str, version: str) -> Path | None: ...

    def download_tool(self, url: str) -> Path: ...

    def extract_zip(self, archive: Path) -> Path: ...

    def cache_dir(self, source: Path, tool: str, version: str) -> Path: ...


RegistryFactory = Callable[..., ReleaseRegistry]


def registry_for(api_url: str, token: str, *, factory: RegistryFactory = GitHubClient) -> ReleaseRegistry:
    """Return a client for the public release registry.

    PMD releases only exist on github.com. The workflow token is only valid
    there when the workflow itself runs against the public API; for GitHub
    Enterprise Server instances the lookup is made anonymously.

    Args:
        api_url: API root the workflow runs against (``GITHUB_API_URL``).
        token: Workflow token.
        factory: Client constructor accepting ``base_url`` and ``token``.

    Returns:
        ReleaseRegistry: Client targeting the public API.
    """

    if api_url.rstrip("/") == PUBLIC_GITHUB_API_URL:
        debug(f"Using token to access repos/{PMD_OWNER}/{PMD_REPO}/releases on {api_url}")
        return factory(base_url=PUBLIC_GITHUB_API_URL, token=token)
    debug(
        f"Not using token to access repos/{PMD_OWNER}/{PMD_REPO}/releases on {PUBLIC_GITHUB_API_URL}, "
        f"as token is for {api_url}",
    )
    return factory(base_url=PUBLIC_GITHUB_API_URL, token=None)


def version_from_release(release: Mapping[str, Any]) -> str:
    """Return the PMD version encoded in the release tag (``pmd_releases/<version>``)."""

    return str(release.get("tag_name", "")).replace(RELEASE_TAG_PREFIX, "", 1)


def download_url_for(release: Mapping[str, Any]) -> str:
    """Return the binary distribution URL of ``release``.

    Both the ``pmd-bin-<v>.zip`` and the ``pmd-dist-<v>-bin.zip`` asset names
    are recognised.

    Raises:
        ResolutionFailure: If the release carries no binary distribution.
    """

    version = version_from_release(release)
    expected = {f"pmd-bin-{version}.zip", f"pmd-dist-{version}-bin.zip"}
    for asset in release.get("assets") or ():
        if asset.get("name") in expected:
            url = str(asset["browser_download_url"])
            debug(f"url: {url}")
            return url
    raise ResolutionFailure(f"Release {release.get('tag_name')} has no PMD binary distribution asset")


class ArtifactResolver:
    """Locate the PMD distribution for a version request."""

    def __init__(
        self,
        cache: ArtifactCache,
        *,
        api_url: str = PUBLIC_GITHUB_API_URL,
        registry_factory: RegistryFactory = GitHubClient,
    ) -> None:
        """Create a resolver.

        Args:
            cache: Artifact cache used to download, extract and store PMD.
            api_url: API root of the hosting workflow, decides token usage.
            registry_factory: Constructor for the release registry client.
        """

        self._cache = cache
        self._api_url = api_url
        self._registry_factory = registry_factory

    def resolve(self, version_request: str, token: str, download_url: str | None = None) -> ToolInfo:
        """Return the distribution for ``version_request``.

        Args:
            version_request: Semantic version or ``latest``.
            token: Workflow token used for the registry lookup when permitted.
            download_url: Optional explicit distribution URL.

        Returns:
            ToolInfo: Resolved version and distribution root.

        Raises:
            InvalidArgumentError: If ``latest`` is combined with ``download_url``.
            ResolutionFailure: If the registry, download or extraction fails.
        """

        if download_url and version_request == LATEST:
            raise InvalidArgumentError(
                f"Can't combine version={version_request} with custom downloadUrl={download_url}",
            )
        try:
            if download_url:
                return self._from_url(version_request, download_url)
            return self._from_release(version_request, token)
        except _RESOLUTION_ERRORS as exc:
            raise ResolutionFailure(f"Unable to obtain PMD {version_request}: {exc}") from exc

    def _from_url(self, version: str, download_url: str) -> ToolInfo:
        archive = self._cache.download_tool(download_url)
        extracted = self._cache.extract_zip(archive)
        info(f"Downloaded PMD {version} from {download_url} to {extracted}")
        entries = sorted(entry.name for entry in extracted.iterdir())
        debug(f"ZIP archive content: {', '.join(entries)}")
        if not entries:
            raise ResolutionFailure(f"Archive downloaded from {download_url} is empty")
        debug(f"Using the first entry as basepath for PMD: {entries[0]}")
        return ToolInfo(version=version, path=extracted / entries[0])

    def _from_release(self, version_request: str, token: str) -> ToolInfo:
        version = version_request
        cached = self._cache.find(PMD_TOOL_NAME, version)
        debug(f"cached path result: {cached}")
        if cached is None:
            release = self._lookup_release(version_request, token)
            version = version_from_release(release)
            cached = self._cache.find(PMD_TOOL_NAME, version)
            if cached is None:
                archive = self._cache.download_tool(download_url_for(release))
                extracted = self._cache.extract_zip(archive)
                cached = self._cache.cache_dir(extracted, PMD_TOOL_NAME, version)
        info(f"Using PMD {version} from cached path {cached}")
        return ToolInfo(version=version, path=cached / f"pmd-bin-{version}")

    def _lookup_release(self, version_request: str, token: str) -> Mapping[str, Any]:
        debug(f"determine release info for {version_request}")
        registry = registry_for(self._api_url, token, factory=self._registry_factory)
        if version_request == LATEST:
            release = registry.get_latest_release(PMD_OWNER, PMD_REPO)
        else:
            release = registry.get_release_by_tag(PMD_OWNER, PMD_REPO, f"{RELEASE_TAG_PREFIX}{version_request}")
        debug(f"found release: {release.get('name')}")
        return release


__all__ = [
    "LATEST",
    "PMD_TOOL_NAME",
    "ArtifactCache",
    "ArtifactResolver",
    "ReleaseRegistry",
    "download_url_for",
    "registry_for",
    "version_from_release",
]
