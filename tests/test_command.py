# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for PMD command construction."""

from __future__ import annotations

from pathlib import Path

from pmdqa.command import FILE_LIST_NAME, build_command
from pmdqa.models import ExplicitPath, FileList, ToolInfo

REPORT_TAIL = ("-f", "sarif", "-R", "ruleset.xml", "-r", "pmd-report.sarif", "--minimum-priority", "5")


def _build(version: str, source, tmp_path: Path, platform: str = "linux"):
    tool_info = ToolInfo(version=version, path=Path("/opt/pmd/pmd-bin-" + version))
    return build_command(
        tool_info,
        source,
        "ruleset.xml",
        "sarif",
        "pmd-report.sarif",
        "5",
        platform,
        working_dir=tmp_path,
    )


def test_pmd6_before_long_options(tmp_path: Path) -> None:
    command = _build("6.40.0", ExplicitPath("."), tmp_path)

    assert command.executable == "/opt/pmd/pmd-bin-6.40.0/bin/run.sh"
    assert command.subcommand == ("pmd",)
    assert command.arguments == ("-no-cache", "-d", ".", *REPORT_TAIL)


def test_pmd6_with_long_options(tmp_path: Path) -> None:
    command = _build("6.41.0", ExplicitPath("."), tmp_path)

    assert command.arguments == ("--no-cache", "-d", ".", *REPORT_TAIL)


def test_prerelease_of_long_option_version_keeps_short_options(tmp_path: Path) -> None:
    command = _build("6.41.0-1", FileList(("src/A.java",)), tmp_path)

    assert command.arguments[0] == "-no-cache"
    assert command.arguments[1] == "-filelist"


def test_pmd7_uses_check_subcommand(tmp_path: Path) -> None:
    command = _build("7.0.0-rc1", ExplicitPath("src"), tmp_path)

    assert command.executable == "/opt/pmd/pmd-bin-7.0.0-rc1/bin/pmd"
    assert command.argv[:4] == (command.executable, "check", "--no-progress", "--no-cache")
    assert command.arguments == ("--no-cache", "-d", "src", *REPORT_TAIL)


def test_windows_uses_batch_script(tmp_path: Path) -> None:
    command = _build("6.41.0", ExplicitPath("."), tmp_path, platform="win32")

    assert command.executable.endswith("\\bin\\pmd.bat")
    assert command.subcommand == ()
    assert command.arguments[0] == "--no-cache"


def test_windows_pmd7_keeps_check_subcommand(tmp_path: Path) -> None:
    command = _build("7.0.0", ExplicitPath("."), tmp_path, platform="win32")

    assert command.executable.endswith("\\bin\\pmd.bat")
    assert command.subcommand == ("check", "--no-progress")


def test_file_list_is_written_and_referenced(tmp_path: Path) -> None:
    command = _build("6.41.0", FileList(("a.txt", "b.txt")), tmp_path)

    file_list = tmp_path / FILE_LIST_NAME
    assert file_list.read_bytes() == b"a.txt,b.txt"
    assert command.arguments[:3] == ("--no-cache", "--file-list", str(file_list))
    assert "-d" not in command.arguments
    assert command.arguments[3:] == REPORT_TAIL


def test_file_list_uses_short_flag_before_long_options(tmp_path: Path) -> None:
    command = _build("6.40.0", FileList(("src/A.java",)), tmp_path)

    assert command.arguments[:3] == ("-no-cache", "-filelist", str(tmp_path / FILE_LIST_NAME))


def test_default_working_dir_references_relative_file_list(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    tool_info = ToolInfo(version="7.0.0", path=tmp_path / "pmd-bin-7.0.0")

    command = build_command(tool_info, FileList(("a.java",)), "r.xml", "sarif", "out.sarif", "3", "linux")

    assert command.arguments[1:3] == ("--file-list", FILE_LIST_NAME)
    assert (tmp_path / FILE_LIST_NAME).read_text(encoding="utf-8") == "a.java"
