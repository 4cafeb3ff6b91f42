# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point running PMD the way the GitHub action does."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer

from .cache import ToolCache
from .changes import UNSUPPORTED, DiffClient, resolve_changed_files
from .command import build_command
from .config import ActionInputs, GitHubEvent, RunnerEnvironment
from .errors import PmdActionError
from .github import GitHubClient
from .logging import fail, info, ok
from .models import ExplicitPath, FileList, SourceSelector
from .process import CommandRunner, run_command, run_pmd
from .releases import ArtifactCache, ArtifactResolver, RegistryFactory
from .sarif import count_violations, fix_results, relativize_report

REPORT_FORMAT: Final[str] = "sarif"
REPORT_FILE: Final[str] = "pmd-report.sarif"
# PMD exits with 4 when violations were found; that is not an execution error.
SUCCESS_EXIT_CODES: Final[frozenset[int]] = frozenset({0, 4})

app = typer.Typer(name="pmdqa", help="Run PMD on a repository or on the files changed by a pull request or push.")


@app.callback()
def _root() -> None:
    """Run PMD on a repository or on the files changed by a pull request or push."""


@dataclass(frozen=True, slots=True)
class AnalysisOutcome:
    """Summary of one analysis run.

    Attributes:
        violations: Number of results in the SARIF report.
        exit_code: PMD process exit code, ``None`` when PMD was not started.
        report_file: Report location, ``None`` when PMD was not started.
    """

    violations: int
    exit_code: int | None
    report_file: Path | None

    @property
    def failed(self) -> bool:
        return self.exit_code is not None and self.exit_code not in SUCCESS_EXIT_CODES


def run_analysis(
    inputs: ActionInputs,
    environment: RunnerEnvironment,
    event: GitHubEvent,
    *,
    cache: ArtifactCache | None = None,
    registry_factory: RegistryFactory = GitHubClient,
    diff_client: DiffClient | None = None,
    command_runner: CommandRunner = run_command,
    platform: str | None = None,
) -> AnalysisOutcome:
    """Resolve PMD, select the sources, run the analysis and post-process the report.

    Args:
        inputs: Validated action inputs.
        environment: Runner provided locations and API endpoint.
        event: Workflow event used to scope the analysis to changed files.
        cache: Artifact cache, a :class:`ToolCache` on the runner by default.
        registry_factory: Constructor for the release registry client.
        diff_client: Client for the diff endpoints, built from ``inputs.token``
            against ``environment.api_url`` when omitted.
        command_runner: Process launcher used to start PMD.
        platform: Host platform identifier, defaults to :data:`sys.platform`.

    Returns:
        AnalysisOutcome: Violation count and PMD exit status.
    """

    tool_cache = cache if cache is not None else ToolCache(environment.tool_cache, environment.temp_dir)
    resolver = ArtifactResolver(tool_cache, api_url=environment.api_url, registry_factory=registry_factory)
    tool_info = resolver.resolve(inputs.version, inputs.token, inputs.download_url or None)

    source: SourceSelector = ExplicitPath(inputs.source_path)
    if inputs.analyze_modified_files_only:
        client = diff_client or GitHubClient(base_url=environment.api_url, token=inputs.token or None)
        changed = resolve_changed_files(event, client, inputs.source_path, platform=platform)
        if changed is not UNSUPPORTED:
            if not changed:
                info(f"No modified files have been found in {inputs.source_path} - exiting")
                return AnalysisOutcome(violations=0, exit_code=None, report_file=None)
            source = FileList(tuple(changed))

    command = build_command(
        tool_info,
        source,
        inputs.rulesets,
        REPORT_FORMAT,
        REPORT_FILE,
        inputs.minimum_priority,
        platform,
    )
    completed = run_pmd(command, runner=command_runner)

    report_file = Path(REPORT_FILE)
    fix_results(report_file)
    relativize_report(report_file, environment.workspace)
    return AnalysisOutcome(
        violations=count_violations(report_file),
        exit_code=completed.returncode,
        report_file=report_file,
    )


def write_output(output_file: Path | None, name: str, value: str) -> None:
    """Append ``name=value`` to the step output file when one is configured."""

    if output_file is None:
        return
    with output_file.open("a", encoding="utf-8") as handle:
        handle.write(f"{name}={value}\n")


@app.command("run")
def run(
    rulesets: Annotated[str, typer.Option("--rulesets", envvar="INPUT_RULESETS", help="Comma separated rulesets.")],
    version: Annotated[
        str,
        typer.Option("--version", envvar="INPUT_VERSION", help="PMD version or 'latest'."),
    ] = "latest",
    download_url: Annotated[
        str,
        typer.Option("--download-url", envvar="INPUT_DOWNLOADURL", help="Explicit PMD distribution URL."),
    ] = "",
    source_path: Annotated[
        str,
        typer.Option("--source-path", envvar="INPUT_SOURCEPATH", help="Directory to analyse."),
    ] = ".",
    analyze_modified_files_only: Annotated[
        bool,
        typer.Option(
            "--analyze-modified-files-only/--analyze-all-files",
            envvar="INPUT_ANALYZEMODIFIEDFILESONLY",
            help="Restrict the analysis to files changed by the triggering event.",
        ),
    ] = True,
    minimum_priority: Annotated[
        str,
        typer.Option("--minimum-priority", envvar="INPUT_MINIMUMPRIORITY", help="Lowest rule priority (1-5)."),
    ] = "5",
    token: Annotated[
        str,
        typer.Option("--token", envvar="INPUT_TOKEN", help="GitHub token.", show_default=False),
    ] = "",
) -> None:
    """Run PMD and record the number of violations as the ``violations`` output."""

    try:
        inputs = ActionInputs.parse(
            version=version,
            download_url=download_url,
            source_path=source_path,
            rulesets=rulesets,
            analyze_modified_files_only=analyze_modified_files_only,
            minimum_priority=minimum_priority,
            token=token,
        )
        environment = RunnerEnvironment.from_environ()
        event = GitHubEvent.from_environ()
        outcome = run_analysis(inputs, environment, event)
    except PmdActionError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc

    write_output(environment.output_file, "violations", str(outcome.violations))
    if outcome.failed:
        fail(f"Error during execution of PMD (exit code {outcome.exit_code})")
        raise typer.Exit(code=1)
    ok(f"PMD found {outcome.violations} violation(s)")


def main() -> None:
    app()


__all__ = ["AnalysisOutcome", "app", "main", "run_analysis", "write_output"]
