"""Descriptor records produced by the inspection aspect."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union


class DescriptorError(RuntimeError):
    """Raised when a descriptor file is missing or malformed."""


class DescriptorFamily(str, Enum):
    """Rule families the synthesizers know how to consume."""

    NATIVE = "native"
    JAVA = "java"
    OTHER = "other"


_NATIVE_PREFIXES = ("cc_", "apple_cc")
_JAVA_PREFIX = "java_"


def classify_kind(kind: str) -> DescriptorFamily:
    """Select the descriptor family from a rule kind."""
    if kind.startswith(_NATIVE_PREFIXES):
        return DescriptorFamily.NATIVE
    if kind.startswith(_JAVA_PREFIX):
        return DescriptorFamily.JAVA
    return DescriptorFamily.OTHER


@dataclass(frozen=True)
class NativeDescriptor:
    """C/C++ compilation context of one target."""

    kind: str
    label: str
    source: Path
    include_dirs: Tuple[str, ...] = ()
    system_include_dirs: Tuple[str, ...] = ()
    quote_include_dirs: Tuple[str, ...] = ()
    defines: Tuple[str, ...] = ()
    built_in_include_directory: Tuple[str, ...] = ()
    c_options: Tuple[str, ...] = ()
    cpp_options: Tuple[str, ...] = ()
    compile_flags: Tuple[str, ...] = ()
    cpp_executable: Optional[str] = None

    family = DescriptorFamily.NATIVE

    @property
    def relative_include_dirs(self) -> Tuple[str, ...]:
        return self.include_dirs + self.system_include_dirs + self.quote_include_dirs

    @property
    def compiler_flags(self) -> Tuple[str, ...]:
        """All flags in the order they are scanned for standard selection."""
        return self.c_options + self.cpp_options + self.compile_flags


@dataclass(frozen=True)
class JarReference:
    """A jar artifact as described by the aspect."""

    relative_path: str
    is_external: bool = False
    is_new_external_version: bool = False
    root_execution_path_fragment: str = ""
    is_source: bool = False


@dataclass(frozen=True)
class ClasspathPair:
    jar: JarReference
    source_jar: Optional[JarReference] = None


@dataclass(frozen=True)
class JavaDescriptor:
    """Classpath context of one Java target."""

    kind: str
    label: str
    source: Path
    jars: Tuple[ClasspathPair, ...] = ()
    runtime_classpath: Tuple[JarReference, ...] = ()
    srcs: Tuple[str, ...] = ()

    family = DescriptorFamily.JAVA


@dataclass(frozen=True)
class OtherDescriptor:
    kind: str
    label: str
    source: Path
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    family = DescriptorFamily.OTHER


Descriptor = Union[NativeDescriptor, JavaDescriptor, OtherDescriptor]


def load_descriptor(path: Path | str) -> Descriptor:
    """Read one descriptor file and return its family-specific record."""
    descriptor_path = Path(path)
    try:
        text = descriptor_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DescriptorError(f"Cannot read descriptor {descriptor_path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"Malformed descriptor {descriptor_path}: {exc}") from exc
    return parse_descriptor(data, descriptor_path)


def parse_descriptor(data: Any, source: Path) -> Descriptor:
    if not isinstance(data, dict):
        raise DescriptorError(f"Descriptor {source} must contain a JSON object")
    kind = data.get("kind")
    if not isinstance(kind, str):
        raise DescriptorError(f"Descriptor {source} has no rule kind")
    label = _target_label(data)

    family = classify_kind(kind)
    if family is DescriptorFamily.NATIVE:
        cc = _as_dict(data.get("cc"))
        executable = cc.get("cpp_executable")
        return NativeDescriptor(
            kind=kind,
            label=label,
            source=source,
            include_dirs=_str_tuple(cc.get("include_dirs")),
            system_include_dirs=_str_tuple(cc.get("system_include_dirs")),
            quote_include_dirs=_str_tuple(cc.get("quote_include_dirs")),
            defines=_str_tuple(cc.get("defines")),
            built_in_include_directory=_str_tuple(cc.get("built_in_include_directory")),
            c_options=_str_tuple(cc.get("c_option")),
            cpp_options=_str_tuple(cc.get("cpp_option")),
            compile_flags=_str_tuple(cc.get("base_compiler_option"))
            + _str_tuple(cc.get("unfiltered_compiler_option"))
            + _str_tuple(cc.get("compile_flags")),
            cpp_executable=executable if isinstance(executable, str) and executable else None,
        )
    if family is DescriptorFamily.JAVA:
        java = _as_dict(data.get("java"))
        pairs = []
        for item in java.get("jars") or []:
            if not isinstance(item, dict):
                continue
            jar = _jar_reference(item.get("jar"))
            if jar is None:
                continue
            pairs.append(ClasspathPair(jar=jar, source_jar=_jar_reference(item.get("source_jar"))))
        runtime = [_jar_reference(item) for item in java.get("runtime_classpath") or []]
        return JavaDescriptor(
            kind=kind,
            label=label,
            source=source,
            jars=tuple(pairs),
            runtime_classpath=tuple(ref for ref in runtime if ref is not None),
            srcs=_str_tuple(_as_dict(data.get("files")).get("srcs")),
        )
    return OtherDescriptor(kind=kind, label=label, source=source, raw=data)


def _target_label(data: Dict[str, Any]) -> str:
    target = data.get("target")
    if isinstance(target, dict) and isinstance(target.get("label"), str):
        return target["label"]
    label = data.get("label")
    return label if isinstance(label, str) else ""


def _jar_reference(value: Any) -> Optional[JarReference]:
    if not isinstance(value, dict):
        return None
    relative_path = value.get("relative_path")
    if not isinstance(relative_path, str) or not relative_path:
        return None
    fragment = value.get("root_execution_path_fragment")
    return JarReference(
        relative_path=relative_path,
        is_external=bool(value.get("is_external", False)),
        is_new_external_version=bool(value.get("is_new_external_version", False)),
        root_execution_path_fragment=fragment if isinstance(fragment, str) else "",
        is_source=bool(value.get("is_source", False)),
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(item for item in value if isinstance(item, str))
    return ()
