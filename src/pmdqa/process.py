# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch PMD without a shell and report its output."""

from __future__ import annotations

# Bandit: subprocess usage is intentional; PMD is launched from an argument
# vector assembled by the command builder with ``shell=True`` disabled.
import subprocess  # nosec B404
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .logging import debug, info
from .models import PmdCommand

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

CommandRunner = Callable[..., "_CompletedProcess[str]"]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture_output: bool = False,
) -> _CompletedProcess[str]:
    """Execute *args* and return the completed process whatever its exit status."""

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)
    # Bandit: the argument vector is assembled by the command builder; no shell expansion.
    return subprocess.run(  # nosec B603
        list(args),
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=capture_output,
        text=True,
    )


def run_pmd(
    command: PmdCommand,
    *,
    cwd: Path | None = None,
    runner: CommandRunner = run_command,
) -> _CompletedProcess[str]:
    """Run PMD and return the completed process regardless of its exit status.

    PMD reports rule violations through its exit code, so a non-zero status is
    a normal outcome that callers interpret from the report.

    Args:
        command: Command produced by :func:`pmdqa.command.build_command`.
        cwd: Optional working directory for the PMD process.
        runner: Process launcher, replaceable for testing.

    Returns:
        CompletedProcess[str]: Captured stdout, stderr and exit code.
    """

    info(f"Executing {' '.join(command.argv)}")
    completed = runner(list(command.argv), cwd=cwd, capture_output=True)
    debug(f"stdout: {completed.stdout}")
    debug(f"stderr: {completed.stderr}")
    debug(f"exitCode: {completed.returncode}")
    return completed


__all__ = ["CommandRunner", "run_command", "run_pmd"]
