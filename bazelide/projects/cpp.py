"""Generation of `.vscode/c_cpp_properties.json` from native descriptors."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..descriptors.aggregate import WORKSPACE_FOLDER_TOKEN, NativeAggregate
from ..descriptors.base import NativeDescriptor
from ..logging import get_logger
from ..models import WorkspaceProperties
from ..stores import JsonDocumentStore

CPP_PROPERTIES_PATH = Path(".vscode") / "c_cpp_properties.json"
DEFAULT_SCHEMA_VERSION = 4
DEFAULT_MODE = "${default}"
UNKNOWN_PLATFORM = "Unknown"

_PLATFORM_NAMES = {
    "linux": "Linux",
    "darwin": "Mac",
    "win32": "Win32",
}

_GCC_PATTERN = re.compile(r"(?:^|[-_])(?:gcc|g\+\+)(?:-\d+(?:\.\d+)*)?$")
_CLANG_PATTERN = re.compile(r"clang(?:\+\+)?(?:-\d+(?:\.\d+)*)?$")

_C_STANDARD_FLAGS = {
    "-std=c89": "c89",
    "-std=c90": "c89",
    "-std=gnu89": "c89",
    "-std=gnu90": "c89",
    "-std=c99": "c99",
    "-std=c9x": "c99",
    "-std=gnu99": "c99",
    "-std=gnu9x": "c99",
    "-std=c11": "c11",
    "-std=c1x": "c11",
    "-std=gnu11": "c11",
    "-std=gnu1x": "c11",
    "-std=c17": "c17",
    "-std=c18": "c17",
    "-std=gnu17": "c17",
    "-std=gnu18": "c17",
    "/std:c11": "c11",
    "/std:c17": "c17",
}

_CPP_STANDARD_FLAGS = {
    "-std=c++98": "c++98",
    "-std=gnu++98": "c++98",
    "-std=c++03": "c++03",
    "-std=gnu++03": "c++03",
    "-std=c++11": "c++11",
    "-std=c++0x": "c++11",
    "-std=gnu++11": "c++11",
    "-std=gnu++0x": "c++11",
    "-std=c++14": "c++14",
    "-std=c++1y": "c++14",
    "-std=gnu++14": "c++14",
    "-std=gnu++1y": "c++14",
    "-std=c++17": "c++17",
    "-std=c++1z": "c++17",
    "-std=gnu++17": "c++17",
    "-std=gnu++1z": "c++17",
    "-std=c++20": "c++20",
    "-std=c++2a": "c++20",
    "-std=gnu++20": "c++20",
    "-std=gnu++2a": "c++20",
    "-std=c++23": "c++23",
    "-std=c++2b": "c++23",
    "-std=gnu++23": "c++23",
    "-std=gnu++2b": "c++23",
    "/std:c++14": "c++14",
    "/std:c++17": "c++17",
    "/std:c++20": "c++20",
}

Confirm = Callable[[str], bool]


@dataclass
class CppSynthesisResult:
    """Outcome of merging one target into the properties document."""

    path: Path
    configuration_name: str
    created: bool
    written: bool


def host_platform_name(platform: str | None = None) -> str:
    key = platform if platform is not None else sys.platform
    if key.startswith("linux"):
        key = "linux"
    return _PLATFORM_NAMES.get(key, UNKNOWN_PLATFORM)


def configuration_name(platform_name: str, target_label: str) -> str:
    return f"{platform_name} ({target_label})"


def infer_intellisense_mode(executable: Optional[str]) -> str:
    """Guess the IntelliSense mode from the compiler executable name."""
    if not executable:
        return DEFAULT_MODE
    name = PureWindowsPath(PurePosixPath(executable).name).name
    if name.lower().endswith(".exe"):
        name = name[:-4]
    if _CLANG_PATTERN.search(name):
        return "clang-x64"
    if _GCC_PATTERN.search(name):
        return "gcc-x64"
    if name.endswith("cl"):
        return "msvc-x64"
    return DEFAULT_MODE


def infer_standards(flags: Iterable[str]) -> Tuple[Optional[str], Optional[str]]:
    """Return the (C, C++) standards selected by the first matching flags."""
    c_standard: Optional[str] = None
    cpp_standard: Optional[str] = None
    for flag in flags:
        if c_standard is None and flag in _C_STANDARD_FLAGS:
            c_standard = _C_STANDARD_FLAGS[flag]
        if cpp_standard is None and flag in _CPP_STANDARD_FLAGS:
            cpp_standard = _CPP_STANDARD_FLAGS[flag]
        if c_standard and cpp_standard:
            break
    return c_standard, cpp_standard


def sanitize_label(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", label)


def default_database_filename(platform_name: str, target_label: str) -> str:
    return (
        f"{WORKSPACE_FOLDER_TOKEN}/.vscode/"
        f"{platform_name}-{sanitize_label(target_label)}.browse.VC.db"
    )


def empty_document() -> Dict[str, Any]:
    return {"configurations": [], "version": DEFAULT_SCHEMA_VERSION}


def find_configuration(configurations: List[Any], name: str) -> Optional[Dict[str, Any]]:
    for entry in configurations:
        if isinstance(entry, dict) and entry.get("name") == name:
            return entry
    return None


def populate_configuration(
    entry: Dict[str, Any],
    *,
    name: str,
    platform_name: str,
    target_label: str,
    aggregate: NativeAggregate,
) -> None:
    """Write the target's compiler context onto an existing or fresh entry."""
    representative: Optional[NativeDescriptor] = aggregate.representative
    entry["name"] = name
    entry["intelliSenseMode"] = infer_intellisense_mode(
        representative.cpp_executable if representative is not None else None
    )
    if representative is not None:
        c_standard, cpp_standard = infer_standards(representative.compiler_flags)
        if c_standard is not None:
            entry["cStandard"] = c_standard
        if cpp_standard is not None:
            entry["cppStandard"] = cpp_standard
    entry["includePath"] = list(aggregate.include_paths)
    entry["defines"] = list(aggregate.defines)
    if not isinstance(entry.get("browse"), dict):
        entry["browse"] = {
            "limitSymbolsToIncludedHeaders": True,
            "databaseFilename": default_database_filename(platform_name, target_label),
        }


class CppProjectSynthesizer:
    """Creates or updates the per-target entry of c_cpp_properties.json."""

    def __init__(
        self,
        workspace: WorkspaceProperties,
        *,
        platform: str | None = None,
        confirm: Confirm | None = None,
    ) -> None:
        self.workspace = workspace
        self.platform_name = host_platform_name(platform)
        self._confirm = confirm or (lambda _name: True)
        self.logger = get_logger("projects.cpp")

    @property
    def document_path(self) -> Path:
        return self.workspace.workspace_folder / CPP_PROPERTIES_PATH

    def synthesize(self, target_label: str, aggregate: NativeAggregate) -> CppSynthesisResult:
        name = configuration_name(self.platform_name, target_label)
        store = JsonDocumentStore(self.document_path)
        created = False

        def _apply(document: Dict[str, Any]) -> bool:
            nonlocal created
            configurations = document.get("configurations")
            if not isinstance(configurations, list):
                configurations = []
                document["configurations"] = configurations
            document.setdefault("version", DEFAULT_SCHEMA_VERSION)

            entry = find_configuration(configurations, name)
            if entry is None:
                entry = {
                    "name": name,
                    "intelliSenseMode": DEFAULT_MODE,
                    "includePath": [],
                    "defines": [],
                }
                configurations.append(entry)
                created = True
            elif not self._confirm(name):
                self.logger.info("Kept existing configuration %r unchanged", name)
                return False

            populate_configuration(
                entry,
                name=name,
                platform_name=self.platform_name,
                target_label=target_label,
                aggregate=aggregate,
            )
            return True

        written = store.merge(_apply, default=empty_document())
        if written:
            self.logger.info(
                "%s configuration %r in %s",
                "Created" if created else "Updated",
                name,
                self.document_path,
            )
        return CppSynthesisResult(
            path=self.document_path,
            configuration_name=name,
            created=created,
            written=written,
        )


__all__ = [
    "CPP_PROPERTIES_PATH",
    "CppProjectSynthesizer",
    "CppSynthesisResult",
    "DEFAULT_MODE",
    "DEFAULT_SCHEMA_VERSION",
    "configuration_name",
    "default_database_filename",
    "host_platform_name",
    "infer_intellisense_mode",
    "infer_standards",
]
