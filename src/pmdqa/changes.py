# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Determine the files changed by a pull request or push event."""

from __future__ import annotations

import ntpath
import posixpath
import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Final, Protocol

from .errors import GitHubApiError, PaginationFailure
from .logging import debug, is_debug, warn
from .models import ChangeEntry, ChangeStatus
from .versioning import WINDOWS_PLATFORM

# Load at most MAX_PAGE pages of PAGE_SIZE entries for both pull request
# files and commit comparisons.
MAX_PAGE: Final[int] = 10
PAGE_SIZE: Final[int] = 30
CURRENT_DIRECTORY: Final[str] = "."

ANALYZED_STATUSES: Final[frozenset[ChangeStatus]] = frozenset(
    {ChangeStatus.ADDED, ChangeStatus.CHANGED, ChangeStatus.MODIFIED},
)


class Unsupported(Enum):
    """Sentinel type returned when an event cannot be scoped to changed files."""

    EVENT = "unsupported-event"


UNSUPPORTED: Final = Unsupported.EVENT

PageFetcher = Callable[[int], tuple[Sequence[ChangeEntry], bool]]


class DiffClient(Protocol):
    """Diff endpoints consumed from the GitHub REST API."""

    def list_pull_files(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        *,
        per_page: int,
        page: int,
    ) -> Sequence[Mapping[str, Any]]: ...

    def compare_commits(
        self,
        owner: str,
        repo: str,
        basehead: str,
        *,
        per_page: int,
        page: int,
    ) -> Mapping[str, Any]: ...


class EventDescriptor(Protocol):
    """Workflow event attributes needed to query the diff endpoints."""

    name: str
    payload: Mapping[str, Any]
    owner: str
    repo: str


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Filenames gathered from paginated diff responses.

    Attributes:
        files: Unique filenames in first-seen order.
        truncated: ``True`` when the page limit was reached before an empty page.
    """

    files: tuple[str, ...]
    truncated: bool


def _path_module(platform: str | None) -> ModuleType:
    host = sys.platform if platform is None else platform
    return ntpath if host == WINDOWS_PLATFORM else posixpath


def extract_filenames(
    entries: Sequence[ChangeEntry],
    page: int,
    source_path: str,
    *,
    platform: str | None = None,
) -> list[str]:
    """Return the analysable filenames of one page of diff entries.

    Only added, changed and modified files are kept. Names are normalised to
    the host path convention and must be ``source_path`` itself or live below
    it; the current directory sentinel ``.`` matches every file.

    Args:
        entries: Diff entries from a single page.
        page: Page number, used for diagnostics.
        source_path: Directory the analysis is restricted to.
        platform: Host platform identifier, defaults to :data:`sys.platform`.

    Returns:
        list[str]: Filtered, normalised filenames in page order.
    """

    paths = _path_module(platform)
    debug(f" got {len(entries)} entries from page {page} to check...")
    if is_debug():
        for index, entry in enumerate(entries):
            status = entry.status.value if entry.status is not None else "unknown"
            debug(f"   {index}: {status} {entry.filename}")

    source = paths.normpath(source_path) if source_path != CURRENT_DIRECTORY else CURRENT_DIRECTORY
    match_all = source == CURRENT_DIRECTORY
    prefix = source if source.endswith(paths.sep) else f"{source}{paths.sep}"

    filenames = [
        name
        for name in (paths.normpath(entry.filename) for entry in entries if entry.status in ANALYZED_STATUSES)
        if match_all or name == source or name.startswith(prefix)
    ]
    debug(f"   after filtering by status and with '{source}' {len(filenames)} files remain:")
    debug(f"   {', '.join(filenames)}")
    return filenames


def collect_pages(
    fetch_page: PageFetcher,
    source_path: str,
    *,
    max_page: int = MAX_PAGE,
    platform: str | None = None,
) -> ChangeSet:
    """Gather filtered, de-duplicated filenames across pages.

    Args:
        fetch_page: Callable returning ``(entries, has_more)`` for a 1-based page.
            Entries of every fetched page are kept; iteration stops after the
            first page reporting ``has_more=False``.
        source_path: Directory the analysis is restricted to.
        max_page: Upper bound on the number of requested pages.
        platform: Host platform identifier used for path normalisation.

    Returns:
        ChangeSet: Collected filenames and whether the page limit cut them short.
    """

    collected: dict[str, None] = {}
    for page in range(1, max_page + 1):
        entries, has_more = fetch_page(page)
        if entries:
            for filename in extract_filenames(entries, page, source_path, platform=platform):
                collected.setdefault(filename, None)
        if not has_more:
            break
    else:
        return ChangeSet(files=tuple(collected), truncated=True)
    return ChangeSet(files=tuple(collected), truncated=False)


def _entries(raw: Iterable[Mapping[str, Any]] | None) -> list[ChangeEntry]:
    return [ChangeEntry.from_payload(item) for item in raw or ()]


def pull_request_pages(client: DiffClient, event: EventDescriptor) -> PageFetcher:
    """Return a page fetcher over the files of the event's pull request."""

    pull_number = int(event.payload["number"])

    def fetch(page: int) -> tuple[Sequence[ChangeEntry], bool]:
        try:
            raw = client.list_pull_files(event.owner, event.repo, pull_number, per_page=PAGE_SIZE, page=page)
        except GitHubApiError as exc:
            raise PaginationFailure(
                f"Unable to list files of pull request {pull_number} (page {page}): {exc}",
                page=page,
            ) from exc
        entries = _entries(raw)
        return entries, bool(entries)

    return fetch


def push_pages(client: DiffClient, event: EventDescriptor) -> PageFetcher:
    """Return a page fetcher over the commit comparison of a push event."""

    basehead = f"{event.payload['before']}...{event.payload['after']}"

    def fetch(page: int) -> tuple[Sequence[ChangeEntry], bool]:
        try:
            comparison = client.compare_commits(event.owner, event.repo, basehead, per_page=PAGE_SIZE, page=page)
        except GitHubApiError as exc:
            raise PaginationFailure(f"Unable to compare {basehead} (page {page}): {exc}", page=page) from exc
        entries = _entries(comparison.get("files"))
        return entries, bool(entries)

    return fetch


def resolve_changed_files(
    event: EventDescriptor,
    client: DiffClient,
    source_path: str,
    *,
    max_page: int = MAX_PAGE,
    platform: str | None = None,
) -> list[str] | Unsupported:
    """Return the changed files of ``event`` below ``source_path``.

    Args:
        event: Workflow event (``pull_request`` or ``push``).
        client: GitHub client exposing the diff endpoints.
        source_path: Directory the analysis is restricted to.
        max_page: Upper bound on the number of requested pages.
        platform: Host platform identifier used for path normalisation.

    Returns:
        list[str] | Unsupported: Filenames in first-seen order, or
        :data:`UNSUPPORTED` when the event kind cannot be scoped and every
        file should be analysed.

    Raises:
        PaginationFailure: If any page request fails.
    """

    if event.name == "pull_request":
        pull_request = event.payload.get("pull_request") or {}
        debug(f"Pull request {event.payload.get('number')}: {pull_request.get('html_url')}")
        change_set = collect_pages(
            pull_request_pages(client, event),
            source_path,
            max_page=max_page,
            platform=platform,
        )
        if change_set.truncated:
            warn(
                f"The pull request {event.payload.get('number')} is too big - "
                "not all changed files will be analyzed!",
            )
        return list(change_set.files)
    if event.name == "push":
        debug(f"Push on {event.payload.get('ref')}: {event.payload.get('before')}...{event.payload.get('after')}")
        change_set = collect_pages(push_pages(client, event), source_path, max_page=max_page, platform=platform)
        if change_set.truncated:
            warn(f"The push on {event.payload.get('ref')} is too big - not all changed files will be analyzed!")
        return list(change_set.files)
    warn(
        f"Unsupported github action event '{event.name}' - cannot determine modified files. "
        "All files will be analyzed.",
    )
    return UNSUPPORTED


__all__ = [
    "ANALYZED_STATUSES",
    "MAX_PAGE",
    "PAGE_SIZE",
    "UNSUPPORTED",
    "ChangeSet",
    "DiffClient",
    "PageFetcher",
    "Unsupported",
    "collect_pages",
    "extract_filenames",
    "pull_request_pages",
    "push_pages",
    "resolve_changed_files",
]
