# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal GitHub REST client covering releases, pull request files and compares."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Protocol
from urllib.parse import quote

import requests

from .errors import GitHubApiError

PUBLIC_GITHUB_API_URL: Final[str] = "https://api.github.com"
DEFAULT_TIMEOUT: Final[float] = 60.0
_API_VERSION: Final[str] = "2022-11-28"

JSONObject = dict[str, Any]


class _Response(Protocol):
    status_code: int

    def json(self) -> Any: ...


class HttpSession(Protocol):
    """Subset of :class:`requests.Session` used by :class:`GitHubClient`."""

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, str | int] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> _Response: ...


class GitHubClient:
    """Issue authenticated or anonymous GET requests against a GitHub REST API."""

    def __init__(
        self,
        *,
        base_url: str = PUBLIC_GITHUB_API_URL,
        token: str | None = None,
        session: HttpSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Create a client bound to ``base_url``.

        Args:
            base_url: REST API root, e.g. ``https://api.github.com``.
            token: Optional token sent as a bearer credential.
            session: HTTP session, a fresh :class:`requests.Session` by default.
            timeout: Per request timeout in seconds.
        """

        self.base_url = base_url.rstrip("/")
        self.authenticated = bool(token)
        self._token = token
        self._session: HttpSession = session if session is not None else requests.Session()
        self._timeout = timeout

    def get_latest_release(self, owner: str, repo: str) -> JSONObject:
        return self._get_object(f"/repos/{owner}/{repo}/releases/latest")

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> JSONObject:
        return self._get_object(f"/repos/{owner}/{repo}/releases/tags/{quote(tag, safe='')}")

    def list_pull_files(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        *,
        per_page: int,
        page: int,
    ) -> list[JSONObject]:
        """Return one page of files changed by pull request ``pull_number``."""

        data = self._get(
            f"/repos/{owner}/{repo}/pulls/{pull_number}/files",
            params={"per_page": per_page, "page": page},
        )
        if not isinstance(data, list):
            raise GitHubApiError(f"Unexpected response listing files of pull request {pull_number}")
        return data

    def compare_commits(
        self,
        owner: str,
        repo: str,
        basehead: str,
        *,
        per_page: int,
        page: int,
    ) -> JSONObject:
        """Return one page of the comparison ``basehead`` (``<base>...<head>``)."""

        return self._get_object(
            f"/repos/{owner}/{repo}/compare/{basehead}",
            params={"per_page": per_page, "page": page},
        )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get_object(self, path: str, *, params: Mapping[str, str | int] | None = None) -> JSONObject:
        data = self._get(path, params=params)
        if not isinstance(data, dict):
            raise GitHubApiError(f"Unexpected response from {path}")
        return data

    def _get(self, path: str, *, params: Mapping[str, str | int] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.get(url, params=params, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as exc:
            raise GitHubApiError(f"GET {url} failed: {exc}") from exc
        if response.status_code >= 400:
            raise GitHubApiError(
                f"GET {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubApiError(f"GET {url} returned invalid JSON") from exc


__all__ = ["DEFAULT_TIMEOUT", "PUBLIC_GITHUB_API_URL", "GitHubClient", "HttpSession", "JSONObject"]
