# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Post-processing of SARIF reports produced by PMD."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Final
from urllib.parse import quote, unquote

from packaging.version import Version

from .errors import InvalidArgumentError
from .logging import debug
from .versioning import parse_version

SarifLog = dict[str, Any]

# PMD before 6.43.0 grouped every violation of a rule into a single result.
SPLIT_RESULTS_FIXED_IN: Final[Version] = Version("6.43.0")
_FILE_SCHEME: Final[str] = "file:///"


def load_report(report_file: Path) -> SarifLog | None:
    """Return the parsed report, or ``None`` when PMD did not write one."""

    if not report_file.is_file():
        return None
    return json.loads(report_file.read_text(encoding="utf-8"))


def _write_report(report_file: Path, report: SarifLog) -> None:
    report_file.write_text(json.dumps(report), encoding="utf-8")


def count_violations(report_file: Path) -> int:
    """Return the number of results in the first run of ``report_file``."""

    report = load_report(report_file)
    if not report or not report.get("runs"):
        return 0
    return len(report["runs"][0].get("results") or ())


def _file_uri(path: str) -> str:
    # Mirrors WHATWG URL parsing of ``file:///<path>``: separators become ``/``.
    normalized = path.replace("\\", "/").lstrip("/")
    return f"{_FILE_SCHEME}{quote(unquote(normalized), safe='/:@!$&()*+,;=~-._')}"


def relativize_report(report_file: Path, workspace: Path) -> None:
    """Rewrite artifact locations relative to ``workspace`` using forward slashes.

    GitHub code scanning and annotations expect repository relative URIs.
    Locations already relative keep their path, converted to forward slashes.
    """

    report = load_report(report_file)
    if not report or not report.get("runs"):
        return
    prefix_uri = _file_uri(f"{workspace}/")
    if not prefix_uri.endswith("/"):
        prefix_uri += "/"
    debug(f"Relativizing sarif report '{report_file}' against '{workspace}'")
    for result in report["runs"][0].get("results") or ():
        for location in result.get("locations") or ():
            artifact = (location.get("physicalLocation") or {}).get("artifactLocation")
            if not artifact or "uri" not in artifact:
                continue
            uri = _file_uri(str(artifact["uri"]))
            if uri.startswith(prefix_uri):
                artifact["uri"] = uri[len(prefix_uri) :]
            else:
                artifact["uri"] = uri[len(_FILE_SCHEME) :]
    _write_report(report_file, report)


def fix_results(report_file: Path) -> None:
    """Split results carrying several locations into one result per location.

    Only reports created by PMD versions older than 6.43.0 are rewritten.
    """

    report = load_report(report_file)
    if not report or not report.get("runs"):
        return
    run = report["runs"][0]
    pmd_version = ((run.get("tool") or {}).get("driver") or {}).get("version")
    if not pmd_version:
        return
    debug(f"Sarif Report was created by PMD version {pmd_version}")
    try:
        if parse_version(str(pmd_version)) >= SPLIT_RESULTS_FIXED_IN:
            debug(f"Sarif Report fix is not needed for PMD version {pmd_version}")
            return
    except InvalidArgumentError:
        debug(f"Unrecognised PMD version {pmd_version} - leaving Sarif Report untouched")
        return

    original_results = run.get("results") or []
    debug(f"Fixing Sarif Report results: count before: {len(original_results)}")
    fixed_results: list[dict[str, Any]] = []
    for result in original_results:
        locations = result.pop("locations", None) or []
        for location in locations:
            split = copy.copy(result)
            split["locations"] = [location]
            fixed_results.append(split)
    debug(f"Fixing Sarif Report results: count after: {len(fixed_results)}")
    run["results"] = fixed_results
    _write_report(report_file, report)


__all__ = ["count_violations", "fix_results", "load_report", "relativize_report"]
