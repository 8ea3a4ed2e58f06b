"""Generation of Eclipse/JDT project files from Java descriptors."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader

from ..descriptors.aggregate import JavaAggregate
from ..descriptors.base import JavaDescriptor
from ..logging import get_logger
from ..models import WorkspaceProperties

CLASSPATH_FILENAME = ".classpath"
PROJECT_FILENAME = ".project"
SETTINGS_PATH = Path(".settings") / "org.eclipse.jdt.core.prefs"
SOURCE_ROOT_PLACEHOLDER = "TO BE DEFINED"
DEFAULT_COMPLIANCE = "1.8"

_PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_TEMPLATES_DIR = Path(__file__).with_name("templates")


class JavaProjectError(RuntimeError):
    """Raised when a Java source file needed for the project cannot be read."""


@dataclass
class JavaSynthesisResult:
    """Paths written for a Java target and any non-fatal warnings."""

    classpath: Path
    project: Path
    settings: Path
    settings_created: bool
    source_root: str
    warnings: List[str] = field(default_factory=list)


def project_name(target_label: str) -> str:
    # Everything after the first colon, matching how labels are decomposed.
    _, separator, target = target_label.partition(":")
    return target if separator else target_label


def _create_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class JavaProjectSynthesizer:
    """Writes `.classpath`, `.project` and the JDT compiler preferences.

    The classpath and project descriptor are regenerated on every run. The
    preferences file is created once and then left to the user.
    """

    def __init__(
        self,
        workspace: WorkspaceProperties,
        *,
        compliance: str = DEFAULT_COMPLIANCE,
    ) -> None:
        self.workspace = workspace
        self.compliance = compliance
        self._env = _create_env()
        self.logger = get_logger("projects.java")

    def synthesize(self, target_label: str, aggregate: JavaAggregate) -> JavaSynthesisResult:
        root = self.workspace.workspace_folder
        warnings: List[str] = []

        source_root = self.infer_source_root(aggregate.representative)
        if source_root is None:
            message = (
                f"No source file found for {target_label}; cannot determine the source "
                f"directory. Edit {CLASSPATH_FILENAME} to complete it."
            )
            self.logger.warning(message)
            warnings.append(message)
            source_root = SOURCE_ROOT_PLACEHOLDER

        classpath_path = root / CLASSPATH_FILENAME
        classpath_path.write_text(
            self._render("classpath.xml.j2", source_root=source_root, jars=aggregate.jars),
            encoding="utf-8",
        )

        project_path = root / PROJECT_FILENAME
        project_path.write_text(
            self._render("project.xml.j2", name=project_name(target_label)),
            encoding="utf-8",
        )

        settings_path = root / SETTINGS_PATH
        settings_created = self._create_settings(settings_path)

        self.logger.info(
            "Wrote Java project files for %s (%d classpath entries)",
            target_label,
            len(aggregate.jars),
        )
        return JavaSynthesisResult(
            classpath=classpath_path,
            project=project_path,
            settings=settings_path,
            settings_created=settings_created,
            source_root=source_root,
            warnings=warnings,
        )

    def infer_source_root(self, descriptor: Optional[JavaDescriptor]) -> Optional[str]:
        """Derive the source root from the first source file's package declaration."""
        if descriptor is None or not descriptor.srcs:
            return None
        source_file = self.workspace.bazel_workspace_path / descriptor.srcs[0]
        try:
            content = source_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise JavaProjectError(f"Cannot read Java source {source_file}: {exc}") from exc
        directory = source_file.parent
        match = _PACKAGE_PATTERN.search(content)
        if match:
            package_parts = match.group(1).split(".")
            if list(directory.parts[-len(package_parts):]) == package_parts:
                directory = Path(*directory.parts[: -len(package_parts)])
        return self._relative(directory)

    def _relative(self, directory: Path) -> str:
        relative = os.path.relpath(directory, self.workspace.workspace_folder)
        return Path(relative).as_posix()

    def _render(self, template_name: str, **context: object) -> str:
        return self._env.get_template(template_name).render(**context)

    def _create_settings(self, settings_path: Path) -> bool:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        content = self._render("org.eclipse.jdt.core.prefs.j2", compliance=self.compliance)
        try:
            with settings_path.open("x", encoding="utf-8") as handle:
                handle.write(content)
        except FileExistsError:
            self.logger.debug("Keeping existing %s", settings_path)
            return False
        return True


__all__ = [
    "CLASSPATH_FILENAME",
    "JavaProjectError",
    "JavaProjectSynthesizer",
    "JavaSynthesisResult",
    "PROJECT_FILENAME",
    "SETTINGS_PATH",
    "SOURCE_ROOT_PLACEHOLDER",
    "project_name",
]
