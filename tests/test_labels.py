"""Tests for label decomposition and rule-kind classification."""

from __future__ import annotations

import pytest

from bazelide.labels import (
    ERROR_SENTINEL,
    decompose_label,
    describe_target,
    rule_kind_to_language,
)
from bazelide.models import DecomposedLabel, TargetRecord


def test_decompose_local_label() -> None:
    assert decompose_label("//lib:math") == DecomposedLabel("local", "lib", "math")


def test_decompose_external_label_strips_at_sign() -> None:
    parts = decompose_label("@maven//com/google/guava:guava")

    assert parts.workspace == "maven"
    assert parts.package == "com/google/guava"
    assert parts.target == "guava"


def test_decompose_root_package() -> None:
    assert decompose_label("//:all") == DecomposedLabel("local", "", "all")


def test_decompose_empty_workspace_name_is_local() -> None:
    assert decompose_label("@//tools:lint").workspace == "local"


def test_decompose_splits_on_first_colon_after_package_marker() -> None:
    parts = decompose_label("//pkg/sub:name:with:colons")

    assert parts.package == "pkg/sub"
    assert parts.target == "name:with:colons"


@pytest.mark.parametrize(
    "label",
    ["", "lib:math", "//lib", "//lib:", "@ws/lib:math", "cc_library rule //a:b"],
)
def test_decompose_invalid_label_returns_sentinel(label: str) -> None:
    parts = decompose_label(label)

    assert parts == DecomposedLabel(ERROR_SENTINEL, ERROR_SENTINEL, ERROR_SENTINEL)


@pytest.mark.parametrize(
    ("kind", "language"),
    [
        ("cc_library", "C++"),
        ("cc_test", "C++"),
        ("cc_toolchain", "C++ Tools"),
        ("py_runtime", "Python"),
        ("java_import", "Java"),
        ("filegroup", "Filegroup"),
        ("  java_binary ", "Java"),
        ("go_binary", "go_binary"),
        ("genrule ", "genrule"),
    ],
)
def test_rule_kind_to_language(kind: str, language: str) -> None:
    assert rule_kind_to_language(kind) == language


def test_describe_target_decomposes_label() -> None:
    record = TargetRecord(kind="cc_library", label="@abseil//absl/strings:strings")

    display = describe_target(record)

    assert display.label == "strings"
    assert display.detail == "C++ | ws{abseil} | pkg{absl/strings}"
    assert display.record is record


def test_describe_target_raw_mode_keeps_label() -> None:
    record = TargetRecord(kind="java_binary", label="//app:main")

    display = describe_target(record, raw=True)

    assert display.label == "//app:main"
    assert display.detail == "java_binary"


def test_describe_target_tolerates_bad_label() -> None:
    display = describe_target(TargetRecord(kind="cc_library", label=""))

    assert display.label == ERROR_SENTINEL
    assert "ws{<ERROR>}" in display.detail
