"""Thin wrapper around the bazel executable."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..config import Settings
from ..logging import format_command, get_logger, log_diagnostics
from ..models import Diagnostic, TargetRecord, WorkspaceProperties
from ..query import parse_diagnostics, parse_query_output

ASPECT_NAME = "vs_code_bazel_inspect"
DEFAULT_ASPECT_PATH = "//.vscode/.vs_code_bazel_build:vs_code_aspect.bzl"
DESCRIPTOR_OUTPUT_GROUP = "descriptor_files"
BAZEL_BIN = "bazel-bin"


@dataclass(frozen=True)
class CommandOutput:
    stdout: str
    stderr: str


class BazelError(RuntimeError):
    """Raised when bazel exits with a failure or cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
        self.diagnostics = list(diagnostics)


Runner = Callable[..., CommandOutput]


class BazelRunner:
    """Runs bazel commands from a workspace and parses their output."""

    def __init__(
        self,
        workspace: WorkspaceProperties,
        settings: Settings | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.workspace = workspace
        self.settings = settings or Settings()
        self._runner = runner or self._default_runner
        self.logger = get_logger("bazel")

    def query(self, expression: str = "...") -> List[TargetRecord]:
        """Return the rules matched by ``expression`` in output order."""
        args = [
            "query",
            expression,
            "--noimplicit_deps",
            "--nohost_deps",
            f"--deleted_packages={','.join(self.settings.package_excludes)}",
            "--output",
            "label_kind",
        ]
        output = self._run(args)
        records = parse_query_output(output.stdout)
        self.logger.debug("Query %r returned %d targets", expression, len(records))
        return records

    def build_descriptors(self, target: str) -> List[Path]:
        """Apply the inspection aspect to ``target`` and list the descriptors it wrote.

        Bazel reports the produced files on stderr, relative to the workspace.
        """
        if not self.workspace.aspect_path:
            raise BazelError("No aspect path configured for this workspace")
        output = self._run(
            [
                "build",
                "--aspects",
                f"{self.workspace.aspect_path}%{ASPECT_NAME}",
                f"--output_groups={DESCRIPTOR_OUTPUT_GROUP}",
                target,
            ]
        )
        lines = [line.strip() for line in output.stderr.strip().splitlines()]
        return [
            self.workspace.bazel_workspace_path / line
            for line in lines
            if line.startswith(f"{BAZEL_BIN}/")
        ]

    def build(self, target: str) -> CommandOutput:
        return self._run(["build", target])

    def run(self, target: str) -> CommandOutput:
        return self._run(["run", target])

    def test(self, target: str) -> CommandOutput:
        return self._run(["test", target])

    def clean(self) -> CommandOutput:
        return self._run(["clean"])

    def _run(self, args: Sequence[str]) -> CommandOutput:
        argv = [self.settings.executable_path, *args]
        cwd = self.workspace.bazel_workspace_path
        self.logger.debug("Running %s in %s", format_command(argv), cwd)
        try:
            return self._runner(argv, cwd=cwd)
        except BazelError as exc:
            exc.diagnostics = parse_diagnostics(exc.stderr)
            log_diagnostics(self.logger, exc.diagnostics)
            raise

    @staticmethod
    def _default_runner(argv: Sequence[str], *, cwd: Path) -> CommandOutput:
        try:
            completed = subprocess.run(
                list(argv),
                cwd=str(cwd),
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise BazelError(f"Failed to start {argv[0]}: {exc}") from exc
        if completed.returncode != 0:
            raise BazelError(
                f"{' '.join(argv[:2])} exited with status {completed.returncode}",
                returncode=completed.returncode,
                stderr=completed.stderr,
            )
        return CommandOutput(stdout=completed.stdout, stderr=completed.stderr)


__all__ = ["ASPECT_NAME", "DEFAULT_ASPECT_PATH", "BazelError", "BazelRunner", "CommandOutput"]
