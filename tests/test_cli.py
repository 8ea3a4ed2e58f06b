"""Tests for the bazelide command line."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

import pytest

from bazelide import cli
from bazelide.bazel import BazelError, CommandOutput
from bazelide.models import TargetDisplay, TargetRecord
from bazelide.projects import CppSynthesisResult, JavaSynthesisResult
from bazelide.tasks import build_tasks


class StubOrchestrator:
    """Records calls and returns canned results instead of running bazel."""

    instances: List["StubOrchestrator"] = []
    fail_with: Exception | None = None

    def __init__(self, settings: Any = None, confirm: Any = None, **_: Any) -> None:
        self.settings = settings
        self.confirm = confirm
        self.calls: List[Tuple[str, Any]] = []
        StubOrchestrator.instances.append(self)

    def _record(self, name: str, value: Any = None) -> None:
        if StubOrchestrator.fail_with is not None:
            raise StubOrchestrator.fail_with
        self.calls.append((name, value))

    def list_targets(self, workspace, expression):
        self._record("targets", expression)
        record = TargetRecord(kind="cc_library", label="//lib:math")
        return [TargetDisplay(label="math", detail="C++ | ws{local} | pkg{lib}", record=record)]

    def list_tasks(self, workspace):
        self._record("tasks")
        return build_tasks([TargetRecord(kind="cc_test", label="//lib:math_test")])

    def build(self, workspace, target):
        self._record("build", target)
        return CommandOutput(stdout="built\n", stderr="")

    def run(self, workspace, target):
        self._record("run", target)
        return CommandOutput(stdout="ran", stderr="")

    def test(self, workspace, target):
        self._record("test", target)
        return CommandOutput(stdout="", stderr="")

    def clean(self, workspace):
        self._record("clean")
        return CommandOutput(stdout="", stderr="")

    def generate_cpp_config(self, workspace, target):
        self._record("cpp-config", target)
        return CppSynthesisResult(
            path=workspace.workspace_folder / ".vscode" / "c_cpp_properties.json",
            configuration_name=f"Linux ({target})",
            created=True,
            written=True,
        )

    def generate_java_config(self, workspace, target):
        self._record("java-config", target)
        root = workspace.workspace_folder
        return JavaSynthesisResult(
            classpath=root / ".classpath",
            project=root / ".project",
            settings=root / ".settings" / "org.eclipse.jdt.core.prefs",
            settings_created=True,
            source_root="TO BE DEFINED",
            warnings=["No source file found"],
        )


@pytest.fixture(autouse=True)
def stub_orchestrator(monkeypatch: pytest.MonkeyPatch) -> type:
    StubOrchestrator.instances = []
    StubOrchestrator.fail_with = None
    monkeypatch.setattr(cli, "Orchestrator", StubOrchestrator)
    return StubOrchestrator


def test_parser_requires_target_for_build() -> None:
    parser = cli._build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["build"])


def test_parser_accepts_verbose_before_and_after_command() -> None:
    parser = cli._build_parser()

    assert parser.parse_args(["-v", "clean"]).verbose is True
    assert parser.parse_args(["clean", "-v"]).verbose is True
    assert parser.parse_args(["clean"]).verbose is False


def test_parser_workspace_defaults() -> None:
    args = cli._build_parser().parse_args(["cpp-config", "//foo:bar"])

    assert args.workspace == "."
    assert args.bazel_workspace is None
    assert args.aspect == "//.vscode/.vs_code_bazel_build:vs_code_aspect.bzl"
    assert args.ask is False


def test_targets_command_prints_listing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["targets", "--workspace", str(tmp_path), "--query", "kind(cc_.*, deps(...))"])

    out = capsys.readouterr().out
    assert out == "math\tC++ | ws{local} | pkg{lib}\n"
    assert StubOrchestrator.instances[0].calls == [("targets", "kind(cc_.*, deps(...))")]


def test_raw_flag_overrides_settings(tmp_path: Path) -> None:
    cli.main(["targets", "--workspace", str(tmp_path), "--raw"])

    assert StubOrchestrator.instances[0].settings.raw_label_display is True


def test_tasks_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["tasks", "--workspace", str(tmp_path)])

    assert capsys.readouterr().out.splitlines() == [
        "clean\t[clean]",
        "test (//lib:math_test)\t[test]",
    ]


def test_build_command_echoes_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["build", "//lib:math", "--workspace", str(tmp_path)])

    assert capsys.readouterr().out == "built\n"
    assert StubOrchestrator.instances[0].calls == [("build", "//lib:math")]


def test_cpp_config_reports_result(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["cpp-config", "//foo:bar", "--workspace", str(tmp_path), "--ask"])

    out = capsys.readouterr().out
    assert "'Linux (//foo:bar)' created" in out
    stub = StubOrchestrator.instances[0]
    assert stub.settings.confirm_overwrite is True
    assert stub.confirm is cli._ask_overwrite


def test_java_config_prints_warnings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["java-config", "//java:app", "--workspace", str(tmp_path)])

    captured = capsys.readouterr()
    assert "Java project files written" in captured.out
    assert "warning: No source file found" in captured.err


def test_bazel_failure_exits_with_status_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    StubOrchestrator.fail_with = BazelError("bazel build exited with status 1", returncode=1)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["build", "//lib:math", "--workspace", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "bazelide build failed: bazel build exited with status 1" in capsys.readouterr().err


def test_missing_workspace_exits_with_status_one(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["clean", "--workspace", str(tmp_path / "absent")])

    assert excinfo.value.code == 1
    assert StubOrchestrator.instances == []


def test_invalid_config_exits_with_status_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".bazelide.yml").write_text("cpp:\n  include_anchor: sideways\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["clean", "--workspace", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "include_anchor" in capsys.readouterr().err


@pytest.mark.parametrize(("answer", "expected"), [("", True), ("y", True), ("YES", True), ("n", False)])
def test_ask_overwrite(monkeypatch: pytest.MonkeyPatch, answer: str, expected: bool) -> None:
    monkeypatch.setattr("builtins.input", lambda prompt: answer)

    assert cli._ask_overwrite("Linux (//foo:bar)") is expected
