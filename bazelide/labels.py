"""Label decomposition and rule-kind classification."""

from __future__ import annotations

import re

from .models import DecomposedLabel, TargetDisplay, TargetRecord

LOCAL_WORKSPACE = "local"
ERROR_SENTINEL = "<ERROR>"

# The package ends at the first colon after `//`; the target keeps any later colons.
_LABEL_PATTERN = re.compile(r"(?:@(?P<ws>[^/]*))?//(?P<pkg>[^:]*):(?P<target>.+)")

_LABEL_ERROR = DecomposedLabel(ERROR_SENTINEL, ERROR_SENTINEL, ERROR_SENTINEL)

_RULE_KIND_LANGUAGES = {
    "cc_library": "C++",
    "cc_import": "C++",
    "cc_binary": "C++",
    "cc_test": "C++",
    "cc_toolchain_suite": "C++ Tools",
    "cc_toolchain": "C++ Tools",
    "py_binary": "Python",
    "py_library": "Python",
    "py_test": "Python",
    "py_runtime": "Python",
    "java_library": "Java",
    "java_import": "Java",
    "java_binary": "Java",
    "java_test": "Java",
    "filegroup": "Filegroup",
}


def decompose_label(label: str) -> DecomposedLabel:
    """Split ``(@ws)?//pkg:target`` into its parts.

    Never raises: a label outside the grammar yields the ``<ERROR>`` triple so
    listings can still render it.
    """
    match = _LABEL_PATTERN.fullmatch(label)
    if match is None:
        return _LABEL_ERROR
    return DecomposedLabel(
        workspace=match.group("ws") or LOCAL_WORKSPACE,
        package=match.group("pkg"),
        target=match.group("target"),
    )


def rule_kind_to_language(rule_kind: str) -> str:
    """Map a rule kind to a display category; unknown kinds pass through."""
    kind = rule_kind.strip()
    return _RULE_KIND_LANGUAGES.get(kind, kind)


def describe_target(record: TargetRecord, *, raw: bool = False) -> TargetDisplay:
    """Return the picker presentation of a query result."""
    if raw:
        return TargetDisplay(label=record.label, detail=record.kind, record=record)
    parts = decompose_label(record.label)
    language = rule_kind_to_language(record.kind)
    return TargetDisplay(
        label=parts.target,
        detail=f"{language} | ws{{{parts.workspace}}} | pkg{{{parts.package}}}",
        record=record,
    )


__all__ = [
    "ERROR_SENTINEL",
    "LOCAL_WORKSPACE",
    "decompose_label",
    "describe_target",
    "rule_kind_to_language",
]
