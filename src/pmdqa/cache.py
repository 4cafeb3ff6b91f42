# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Versioned on-disk tool cache with download and zip extraction helpers.

The layout follows the hosted runner tool cache so that a cache populated by
one step is picked up by later runs on the same machine::

    <root>/<tool>/<version>/<arch>/          extracted distribution
    <root>/<tool>/<version>/<arch>.complete  marker written last
"""

from __future__ import annotations

import platform as _platform
import shutil
import uuid
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Final, Protocol

import requests

from .errors import InvalidArgumentError
from .logging import debug
from .versioning import parse_version

_ARCH_ALIASES: Final[dict[str, str]] = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
}
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024
DOWNLOAD_TIMEOUT: Final[float] = 120.0


class _DownloadResponse(Protocol):
    def raise_for_status(self) -> None: ...

    def iter_content(self, chunk_size: int = ...) -> Iterable[bytes]: ...


HttpGet = Callable[..., _DownloadResponse]


def host_arch() -> str:
    """Return the runner style architecture label for this machine."""

    machine = _platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine or "unknown")


def _is_explicit_version(version: str) -> bool:
    try:
        parse_version(version)
    except InvalidArgumentError:
        return False
    return True


class ToolCache:
    """Store extracted tool distributions keyed by tool name and version."""

    def __init__(
        self,
        root: Path,
        temp_dir: Path,
        *,
        arch: str | None = None,
        http_get: HttpGet | None = None,
    ) -> None:
        """Create a cache rooted at ``root``.

        Args:
            root: Tool cache directory (``RUNNER_TOOL_CACHE`` on hosted runners).
            temp_dir: Scratch directory for downloads and extraction.
            arch: Architecture label, detected from the host when omitted.
            http_get: Callable compatible with :func:`requests.get`.
        """

        self.root = root
        self.temp_dir = temp_dir
        self.arch = arch or host_arch()
        self._http_get: HttpGet = http_get if http_get is not None else requests.get

    def _version_dir(self, tool: str, version: str) -> Path:
        return self.root / tool / version

    def find(self, tool: str, version: str) -> Path | None:
        """Return the cached directory for ``tool`` at ``version`` when complete.

        Only concrete versions are looked up; labels such as ``latest`` never hit.
        """

        if not _is_explicit_version(version):
            debug(f"'{version}' is not an explicit version - skipping tool cache lookup")
            return None
        version_dir = self._version_dir(tool, version)
        cached = version_dir / self.arch
        marker = version_dir / f"{self.arch}.complete"
        if cached.is_dir() and marker.is_file():
            debug(f"Found {tool} {version} in tool cache at {cached}")
            return cached
        return None

    def download_tool(self, url: str) -> Path:
        """Download ``url`` into the scratch directory and return the local file."""

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        destination = self.temp_dir / str(uuid.uuid4())
        debug(f"Downloading {url} to {destination}")
        response = self._http_get(url, stream=True, timeout=DOWNLOAD_TIMEOUT)
        response.raise_for_status()
        with destination.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    handle.write(chunk)
        return destination

    def extract_zip(self, archive: Path) -> Path:
        """Extract ``archive`` into a fresh scratch directory, keeping unix file modes."""

        destination = self.temp_dir / str(uuid.uuid4())
        destination.mkdir(parents=True)
        with zipfile.ZipFile(archive) as bundle:
            for member in bundle.infolist():
                extracted = Path(bundle.extract(member, destination))
                mode = (member.external_attr >> 16) & 0o777
                if mode and not member.is_dir():
                    extracted.chmod(mode)
        return destination

    def cache_dir(self, source: Path, tool: str, version: str) -> Path:
        """Copy ``source`` into the cache under ``tool``/``version`` and mark it complete."""

        version_dir = self._version_dir(tool, version)
        cached = version_dir / self.arch
        marker = version_dir / f"{self.arch}.complete"
        marker.unlink(missing_ok=True)
        if cached.exists():
            shutil.rmtree(cached)
        version_dir.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, cached)
        marker.write_text("", encoding="utf-8")
        debug(f"Cached {tool} {version} at {cached}")
        return cached


__all__ = ["DOWNLOAD_TIMEOUT", "HttpGet", "ToolCache", "host_arch"]
