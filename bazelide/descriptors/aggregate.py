"""Merging of descriptor sets into include, define and classpath collections."""

from __future__ import annotations

import posixpath
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from ..config import IncludeAnchor
from ..logging import get_logger
from ..models import WorkspaceProperties
from .base import (
    Descriptor,
    DescriptorFamily,
    JarReference,
    JavaDescriptor,
    NativeDescriptor,
    load_descriptor,
)

WORKSPACE_FOLDER_TOKEN = "${workspaceFolder}"

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:/")

ResultT = TypeVar("ResultT")


@dataclass
class NativeAggregate:
    include_paths: List[str] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    representative: Optional[NativeDescriptor] = None


@dataclass
class JarEntry:
    jar: str
    source_jar: Optional[str] = None


@dataclass
class JavaAggregate:
    jars: List[JarEntry] = field(default_factory=list)
    representative: Optional[JavaDescriptor] = None


class Aggregator(ABC, Generic[ResultT]):
    """Loads every descriptor, then merges the ones of a single family.

    All files are read before merging so one bad descriptor aborts the whole
    pass instead of yielding a partial configuration.
    """

    family: DescriptorFamily

    def __init__(self, workspace: WorkspaceProperties) -> None:
        self.workspace = workspace
        self.logger = get_logger(f"descriptors.{self.family.value}")

    def aggregate(self, descriptor_files: Sequence[Path | str]) -> ResultT:
        descriptors: List[Descriptor] = [load_descriptor(path) for path in descriptor_files]
        selected = [item for item in descriptors if item.family is self.family]
        self.logger.debug(
            "Merging %d of %d descriptors for the %s family",
            len(selected),
            len(descriptors),
            self.family.value,
        )
        return self._merge(selected)

    @abstractmethod
    def _merge(self, descriptors: List[Descriptor]) -> ResultT:
        """Fold the family's descriptors, in sequence order, into one result."""


class NativeAggregator(Aggregator[NativeAggregate]):
    family = DescriptorFamily.NATIVE

    def __init__(
        self,
        workspace: WorkspaceProperties,
        *,
        anchor: IncludeAnchor = IncludeAnchor.EXECROOT,
    ) -> None:
        super().__init__(workspace)
        self.anchor = anchor

    def _merge(self, descriptors: List[Descriptor]) -> NativeAggregate:
        includes: Dict[str, None] = {}
        defines: Dict[str, None] = {}
        representative: Optional[NativeDescriptor] = None
        for descriptor in descriptors:
            if not isinstance(descriptor, NativeDescriptor):
                continue
            for directory in descriptor.built_in_include_directory:
                includes.setdefault(directory, None)
            for directory in descriptor.relative_include_dirs:
                anchored = anchor_include_path(directory, self.workspace, self.anchor)
                if anchored is not None:
                    includes.setdefault(anchored, None)
            for define in descriptor.defines:
                defines.setdefault(define, None)
            representative = descriptor
        return NativeAggregate(
            include_paths=list(includes),
            defines=list(defines),
            representative=representative,
        )


class JavaAggregator(Aggregator[JavaAggregate]):
    family = DescriptorFamily.JAVA

    def _merge(self, descriptors: List[Descriptor]) -> JavaAggregate:
        # Keyed by relative path; a later descriptor may add or replace the source jar.
        jars: Dict[str, JarEntry] = {}
        representative: Optional[JavaDescriptor] = None
        for descriptor in descriptors:
            if not isinstance(descriptor, JavaDescriptor):
                continue
            for reference in descriptor.runtime_classpath:
                entry = jars.setdefault(reference.relative_path, JarEntry(jar=""))
                entry.jar = resolve_jar_path(reference, self.workspace)
            for pair in descriptor.jars:
                entry = jars.setdefault(pair.jar.relative_path, JarEntry(jar=""))
                entry.jar = resolve_jar_path(pair.jar, self.workspace)
                entry.source_jar = (
                    resolve_jar_path(pair.source_jar, self.workspace)
                    if pair.source_jar is not None
                    else None
                )
            representative = descriptor
        return JavaAggregate(jars=list(jars.values()), representative=representative)


def workspace_prefix(workspace: WorkspaceProperties) -> str:
    """Editor-relative location of the Bazel workspace, as a placeholder path."""
    try:
        relative = workspace.bazel_workspace_path.relative_to(workspace.workspace_folder)
    except ValueError:
        return workspace.bazel_workspace_path.as_posix()
    if relative.parts:
        return f"{WORKSPACE_FOLDER_TOKEN}/{relative.as_posix()}"
    return WORKSPACE_FOLDER_TOKEN


def anchor_include_path(
    path: str,
    workspace: WorkspaceProperties,
    anchor: IncludeAnchor = IncludeAnchor.EXECROOT,
) -> Optional[str]:
    """Anchor an aspect-relative include directory for the editor.

    Returns None for ``.``, which has no standalone meaning once anchored.
    """
    normalized = posixpath.normpath(path.replace("\\", "/"))
    if normalized == ".":
        return None
    if posixpath.isabs(normalized) or _DRIVE_PATTERN.match(normalized):
        return normalized
    prefix = workspace_prefix(workspace)
    symlink = workspace.symlink_name
    if normalized == symlink or normalized.startswith(f"{symlink}/"):
        return f"{prefix}/{normalized}"
    if anchor is IncludeAnchor.EXECROOT:
        return f"{prefix}/{symlink}/{normalized}"
    return f"{prefix}/{normalized}"


def resolve_jar_path(reference: JarReference, workspace: WorkspaceProperties) -> str:
    """Absolute location of a jar inside the Bazel workspace or its execroot link."""
    base = workspace.bazel_workspace_path
    if reference.is_external and reference.is_new_external_version:
        base = base / workspace.symlink_name
    return str(base / reference.root_execution_path_fragment / reference.relative_path)


__all__ = [
    "Aggregator",
    "JarEntry",
    "JavaAggregate",
    "JavaAggregator",
    "NativeAggregate",
    "NativeAggregator",
    "WORKSPACE_FOLDER_TOKEN",
    "anchor_include_path",
    "resolve_jar_path",
    "workspace_prefix",
]
