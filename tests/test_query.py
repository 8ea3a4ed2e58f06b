"""Tests for query output and diagnostic parsing."""

from __future__ import annotations

from bazelide.models import Diagnostic, TargetRecord
from bazelide.query import parse_diagnostics, parse_query_output


def test_parse_single_rule_line() -> None:
    records = parse_query_output("cc_library rule //lib:math\n")

    assert records == [TargetRecord(kind="cc_library", label="//lib:math")]


def test_parse_preserves_output_order() -> None:
    output = "\n".join(
        [
            "java_binary rule //app:main",
            "cc_library rule //lib:math",
            "py_test rule @tools//py:check",
        ]
    )

    records = parse_query_output(output)

    assert [record.label for record in records] == ["//app:main", "//lib:math", "@tools//py:check"]
    assert [record.kind for record in records] == ["java_binary", "cc_library", "py_test"]


def test_parse_empty_output() -> None:
    assert parse_query_output("") == []
    assert parse_query_output("  \n\n") == []


def test_parse_drops_lines_without_separator() -> None:
    output = "Loading: 0 packages loaded\ncc_binary rule //app:tool\nsource file //app:main.cc"

    assert parse_query_output(output) == [TargetRecord(kind="cc_binary", label="//app:tool")]


def test_parse_keeps_kind_untrimmed_and_empty_label() -> None:
    output = "cc_library rule //a:b\n  cc_import rule \njava_library rule //j:k"

    records = parse_query_output(output)

    assert records[1] == TargetRecord(kind="  cc_import", label="")
    assert len(records) == 3


def test_parse_uses_first_separator() -> None:
    records = parse_query_output("genrule rule //gen:rule rule")

    assert records == [TargetRecord(kind="genrule", label="//gen:rule rule")]


def test_parse_diagnostics_extracts_locations() -> None:
    stderr = "\n".join(
        [
            "Loading: 1 packages loaded",
            "ERROR: /home/dev/ws/lib/BUILD:12:8: no such target '//lib:missing'",
            "ERROR: C:/ws/app/BUILD.bazel:3:1: syntax error at 'rule'",
            "ERROR: evaluation of query failed",
        ]
    )

    diagnostics = parse_diagnostics(stderr)

    assert diagnostics == [
        Diagnostic(
            path="/home/dev/ws/lib/BUILD",
            line=12,
            column=8,
            message="no such target '//lib:missing'",
        ),
        Diagnostic(path="C:/ws/app/BUILD.bazel", line=3, column=1, message="syntax error at 'rule'"),
    ]
