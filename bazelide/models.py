"""Core data models shared across bazelide components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class TargetRecord:
    """One `<kind> rule <label>` line of query output."""

    kind: str
    label: str


@dataclass(frozen=True)
class DecomposedLabel:
    """Workspace, package and target parts of a label."""

    workspace: str
    package: str
    target: str


@dataclass(frozen=True)
class TargetDisplay:
    """Presentation of a target for pickers and listings."""

    label: str
    detail: str
    record: TargetRecord


@dataclass(frozen=True)
class Diagnostic:
    """Error location extracted from build tool output."""

    path: str
    line: int
    column: int
    message: str


@dataclass(frozen=True)
class WorkspaceProperties:
    """Locations of one Bazel workspace inside an editor workspace folder.

    ``workspace_folder`` is the editor root where project files are written,
    ``bazel_workspace_path`` the directory holding the WORKSPACE file. They are
    often, but not always, the same directory.
    """

    workspace_folder: Path
    bazel_workspace_path: Path
    aspect_path: Optional[str] = None

    @property
    def symlink_name(self) -> str:
        """Name of the execution-root symlink Bazel creates in the workspace."""
        return f"bazel-{self.bazel_workspace_path.name}"

    @classmethod
    def from_path(cls, path: str | Path, aspect_path: str | None = None) -> "WorkspaceProperties":
        root = Path(path).expanduser().resolve()
        return cls(workspace_folder=root, bazel_workspace_path=root, aspect_path=aspect_path)
