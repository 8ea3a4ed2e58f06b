"""Parsing of `bazel query --output label_kind` results and error output."""

from __future__ import annotations

import re
from typing import List

from .models import Diagnostic, TargetRecord

RULE_SEPARATOR = " rule "

_ERROR_PATTERN = re.compile(r"ERROR: ((\w:)?([^:]*)):(\d+):(\d+): (.*)")


def parse_query_output(output: str) -> List[TargetRecord]:
    """Turn label_kind output into target records, keeping line order.

    The kind is everything before the first separator and is not trimmed;
    lines without the separator are dropped.
    """
    text = output.strip()
    if not text:
        return []
    records: List[TargetRecord] = []
    for line in text.split("\n"):
        index = line.find(RULE_SEPARATOR)
        if index == -1:
            continue
        records.append(
            TargetRecord(kind=line[:index], label=line[index + len(RULE_SEPARATOR):])
        )
    return records


def parse_diagnostics(output: str) -> List[Diagnostic]:
    """Extract ``ERROR: <path>:<line>:<col>: <message>`` lines."""
    diagnostics: List[Diagnostic] = []
    for line in output.splitlines():
        match = _ERROR_PATTERN.match(line.strip())
        if match is None:
            continue
        diagnostics.append(
            Diagnostic(
                path=match.group(1),
                line=int(match.group(4)),
                column=int(match.group(5)),
                message=match.group(6),
            )
        )
    return diagnostics


__all__ = ["RULE_SEPARATOR", "parse_diagnostics", "parse_query_output"]
