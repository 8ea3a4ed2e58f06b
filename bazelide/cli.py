"""CLI entrypoints for bazelide commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .bazel.runner import DEFAULT_ASPECT_PATH
from .config import load_config
from .logging import configure_logging, get_logger
from .models import WorkspaceProperties
from .orchestrator import ALL_TARGETS_QUERY, Orchestrator


_TARGET_COMMANDS = {"build", "run", "test", "cpp-config", "java-config"}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_workspace_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "--workspace",
        default=".",
        help="Editor workspace folder (defaults to current directory).",
    )
    parser.add_argument(
        "--bazel-workspace",
        default=None,
        help="Directory holding the WORKSPACE file when it differs from --workspace.",
    )
    parser.add_argument(
        "--aspect",
        default=DEFAULT_ASPECT_PATH,
        help="Label of the .bzl file defining the inspection aspect.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bazelide",
        description="Query Bazel targets and generate editor project configuration.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    targets_parser = subparsers.add_parser("targets", help="List targets matching a query.")
    _add_workspace_options(targets_parser)
    targets_parser.add_argument("--query", default=ALL_TARGETS_QUERY, help="Query expression.")
    targets_parser.add_argument(
        "--raw", action="store_true", help="Show full labels instead of decomposed ones."
    )

    tasks_parser = subparsers.add_parser("tasks", help="List editor tasks for the workspace.")
    _add_workspace_options(tasks_parser)

    for name, help_text in (
        ("build", "Build a target."),
        ("run", "Run a binary target."),
        ("test", "Test a target."),
        ("java-config", "Write .classpath/.project files for a Java target."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_workspace_options(sub)
        sub.add_argument("target", help="Target label, for example //pkg:name.")

    cpp_parser = subparsers.add_parser(
        "cpp-config", help="Merge a target into .vscode/c_cpp_properties.json."
    )
    _add_workspace_options(cpp_parser)
    cpp_parser.add_argument("target", help="Target label, for example //pkg:name.")
    cpp_parser.add_argument(
        "--ask",
        action="store_true",
        help="Ask before overwriting an existing configuration for the target.",
    )

    clean_parser = subparsers.add_parser("clean", help="Remove bazel build outputs.")
    _add_workspace_options(clean_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def _workspace_from_args(args: argparse.Namespace) -> WorkspaceProperties:
    root = Path(args.workspace).expanduser().resolve()
    bazel_root = (
        Path(args.bazel_workspace).expanduser().resolve() if args.bazel_workspace else root
    )
    if not root.is_dir():
        raise FileNotFoundError(f"Workspace folder {root} does not exist")
    return WorkspaceProperties(
        workspace_folder=root,
        bazel_workspace_path=bazel_root,
        aspect_path=args.aspect,
    )


def _ask_overwrite(name: str) -> bool:
    answer = input(f"Configuration {name!r} already exists. Overwrite it? [Y/n] ")
    return answer.strip().lower() in {"", "y", "yes"}


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for bazelide commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)
    logger = get_logger("cli")

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        workspace = _workspace_from_args(args)
        settings = load_config(workspace.workspace_folder).with_overrides(
            raw_label_display=True if getattr(args, "raw", False) else None,
            confirm_overwrite=True if getattr(args, "ask", False) else None,
        )
        orchestrator = Orchestrator(settings=settings, confirm=_ask_overwrite)
        _dispatch(orchestrator, workspace, args)
    except (RuntimeError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        parser.exit(1, f"bazelide {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _dispatch(
    orchestrator: Orchestrator, workspace: WorkspaceProperties, args: argparse.Namespace
) -> None:
    target: Optional[str] = args.target if args.command in _TARGET_COMMANDS else None

    if args.command == "targets":
        for display in orchestrator.list_targets(workspace, args.query):
            print(f"{display.label}\t{display.detail}")
    elif args.command == "tasks":
        for task in orchestrator.list_tasks(workspace):
            print(f"{task.name}\t[{task.group.value}]")
    elif args.command == "build":
        _echo(orchestrator.build(workspace, target))
    elif args.command == "run":
        _echo(orchestrator.run(workspace, target))
    elif args.command == "test":
        _echo(orchestrator.test(workspace, target))
    elif args.command == "clean":
        _echo(orchestrator.clean(workspace))
    elif args.command == "cpp-config":
        result = orchestrator.generate_cpp_config(workspace, target)
        if result is None:
            print("No C/C++ descriptors were produced; nothing written")
            return
        if result.written:
            action = "created" if result.created else "updated"
            print(f"Configuration {result.configuration_name!r} {action} in {_relativize(result.path)}")
        else:
            print(f"Configuration {result.configuration_name!r} left unchanged")
    elif args.command == "java-config":
        java_result = orchestrator.generate_java_config(workspace, target)
        if java_result is None:
            print("No descriptors were produced; nothing written")
            return
        for warning in java_result.warnings:
            print(f"warning: {warning}", file=sys.stderr)
        print(f"Java project files written to {_relativize(java_result.classpath.parent)}")
    else:  # pragma: no cover - argparse enforces choices
        raise RuntimeError(f"Unknown command {args.command}")


def _echo(output: object) -> None:
    stdout = getattr(output, "stdout", "")
    if stdout:
        print(stdout, end="" if stdout.endswith("\n") else "\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
