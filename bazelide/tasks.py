"""Editor task definitions derived from query results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .models import TargetRecord


class TaskGroup(str, Enum):
    BUILD = "build"
    TEST = "test"
    CLEAN = "clean"


@dataclass(frozen=True)
class BazelTask:
    """A runnable bazel invocation offered to the editor."""

    name: str
    command: str
    group: TaskGroup
    target: Optional[str] = None
    kind: Optional[str] = None

    @property
    def args(self) -> Tuple[str, ...]:
        return (self.command, self.target) if self.target else (self.command,)


_RUN_KINDS = {"container_push"}


def task_for_target(kind: str, label: str) -> BazelTask:
    if "test" in kind:
        command, group = "test", TaskGroup.TEST
    elif kind in _RUN_KINDS:
        command, group = "run", TaskGroup.BUILD
    else:
        command, group = "build", TaskGroup.BUILD
    return BazelTask(
        name=f"{command} ({label})",
        command=command,
        group=group,
        target=label,
        kind=kind,
    )


def clean_task() -> BazelTask:
    return BazelTask(name="clean", command="clean", group=TaskGroup.CLEAN)


def build_tasks(records: Iterable[TargetRecord]) -> List[BazelTask]:
    """One task per target plus ``clean``, sorted by name."""
    tasks = [task_for_target(record.kind, record.label) for record in records]
    tasks.append(clean_task())
    return sorted(tasks, key=lambda task: task.name)


__all__ = ["BazelTask", "TaskGroup", "build_tasks", "clean_task", "task_for_target"]
