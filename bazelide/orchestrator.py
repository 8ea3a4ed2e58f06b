"""Pipeline orchestration for target listing, builds and project generation."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from .bazel import BazelRunner, CommandOutput
from .bazel.runner import BAZEL_BIN
from .config import Settings, load_config
from .descriptors import (
    JavaAggregator,
    NativeAggregator,
    find_descriptor_files,
    remove_descriptor_files,
)
from .labels import describe_target
from .logging import get_logger
from .models import TargetDisplay, WorkspaceProperties
from .projects import (
    CppProjectSynthesizer,
    CppSynthesisResult,
    JavaProjectSynthesizer,
    JavaSynthesisResult,
)
from .tasks import BazelTask, build_tasks

ALL_TARGETS_QUERY = "..."
CPP_TARGETS_QUERY = "kind(cc_.*, deps(...))"
JAVA_TARGETS_QUERY = "kind(java_.*, deps(...))"
BINARY_TARGETS_QUERY = "kind(.*_binary, deps(...))"

RunnerFactory = Callable[[WorkspaceProperties, Settings], BazelRunner]


class Orchestrator:
    """Coordinates bazel invocations, descriptor aggregation and file synthesis.

    Settings are resolved per call, either from the snapshot supplied at
    construction time or from the workspace's ``.bazelide.yml``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner_factory: RunnerFactory | None = None,
        confirm: Callable[[str], bool] | None = None,
        platform: str | None = None,
    ) -> None:
        self._settings = settings
        self._runner_factory = runner_factory or (
            lambda workspace, settings: BazelRunner(workspace, settings)
        )
        self._confirm = confirm
        self._platform = platform
        self.logger = get_logger("orchestrator")

    def settings_for(self, workspace: WorkspaceProperties) -> Settings:
        if self._settings is not None:
            return self._settings
        return load_config(workspace.workspace_folder)

    def list_targets(
        self,
        workspace: WorkspaceProperties,
        expression: str = ALL_TARGETS_QUERY,
        *,
        raw: bool | None = None,
    ) -> List[TargetDisplay]:
        settings = self.settings_for(workspace)
        raw_display = settings.raw_label_display if raw is None else raw
        records = self._runner(workspace, settings).query(expression)
        return [describe_target(record, raw=raw_display) for record in records]

    def list_tasks(self, workspace: WorkspaceProperties) -> List[BazelTask]:
        settings = self.settings_for(workspace)
        if not settings.auto_detect_tasks:
            return []
        records = self._runner(workspace, settings).query(ALL_TARGETS_QUERY)
        return build_tasks(records)

    def build(self, workspace: WorkspaceProperties, target: Optional[str]) -> Optional[CommandOutput]:
        if not target:
            return None
        self.logger.info("Building %s", target)
        return self._runner(workspace).build(target)

    def run(self, workspace: WorkspaceProperties, target: Optional[str]) -> Optional[CommandOutput]:
        if not target:
            return None
        self.logger.info("Running %s", target)
        return self._runner(workspace).run(target)

    def test(self, workspace: WorkspaceProperties, target: Optional[str]) -> Optional[CommandOutput]:
        if not target:
            return None
        self.logger.info("Testing %s", target)
        return self._runner(workspace).test(target)

    def clean(self, workspace: WorkspaceProperties) -> CommandOutput:
        self.logger.info("Cleaning %s", workspace.bazel_workspace_path)
        return self._runner(workspace).clean()

    def generate_cpp_config(
        self, workspace: WorkspaceProperties, target: Optional[str]
    ) -> Optional[CppSynthesisResult]:
        """Build descriptors for ``target`` and merge them into c_cpp_properties.json."""
        if not target:
            return None
        settings = self.settings_for(workspace)
        descriptors = self._collect_descriptors(workspace, settings, target)
        try:
            aggregate = NativeAggregator(workspace, anchor=settings.include_anchor).aggregate(
                descriptors
            )
            if aggregate.representative is None:
                self.logger.warning("No C/C++ descriptors were produced for %s", target)
                return None
            confirm = self._confirm if settings.confirm_overwrite else None
            synthesizer = CppProjectSynthesizer(
                workspace, platform=self._platform, confirm=confirm
            )
            return synthesizer.synthesize(target, aggregate)
        finally:
            removed = remove_descriptor_files(descriptors)
            self.logger.debug("Removed %d descriptor files", removed)

    def generate_java_config(
        self, workspace: WorkspaceProperties, target: Optional[str]
    ) -> Optional[JavaSynthesisResult]:
        """Build descriptors for ``target`` and write the Java project files."""
        if not target:
            return None
        settings = self.settings_for(workspace)
        descriptors = self._collect_descriptors(workspace, settings, target)
        if not descriptors:
            self.logger.warning("No descriptors were produced for %s", target)
            return None
        try:
            aggregate = JavaAggregator(workspace).aggregate(descriptors)
            synthesizer = JavaProjectSynthesizer(workspace, compliance=settings.java_compliance)
            return synthesizer.synthesize(target, aggregate)
        finally:
            remove_descriptor_files(descriptors)

    def _collect_descriptors(
        self, workspace: WorkspaceProperties, settings: Settings, target: str
    ) -> List[Path]:
        descriptors = self._runner(workspace, settings).build_descriptors(target)
        if not descriptors:
            descriptors = find_descriptor_files(
                workspace.bazel_workspace_path / BAZEL_BIN, settings.descriptor_marker
            )
        self.logger.debug("Collected %d descriptor files for %s", len(descriptors), target)
        return descriptors

    def _runner(
        self, workspace: WorkspaceProperties, settings: Settings | None = None
    ) -> BazelRunner:
        return self._runner_factory(workspace, settings or self.settings_for(workspace))


__all__ = [
    "ALL_TARGETS_QUERY",
    "BINARY_TARGETS_QUERY",
    "CPP_TARGETS_QUERY",
    "JAVA_TARGETS_QUERY",
    "Orchestrator",
]
