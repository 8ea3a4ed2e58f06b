"""FastAPI application entrypoint for bazelide service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..bazel.runner import DEFAULT_ASPECT_PATH
from ..models import WorkspaceProperties
from ..orchestrator import ALL_TARGETS_QUERY, Orchestrator


ResultT = TypeVar("ResultT")


class WorkspaceRequest(BaseModel):
    workspace: str
    bazel_workspace: Optional[str] = None
    aspect: str = DEFAULT_ASPECT_PATH

    def properties(self) -> WorkspaceProperties:
        root = Path(self.workspace).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Workspace folder {root} does not exist")
        bazel_root = (
            Path(self.bazel_workspace).expanduser().resolve() if self.bazel_workspace else root
        )
        return WorkspaceProperties(
            workspace_folder=root, bazel_workspace_path=bazel_root, aspect_path=self.aspect
        )


class TargetsRequest(WorkspaceRequest):
    query: str = ALL_TARGETS_QUERY
    raw: Optional[bool] = None


class TargetRequest(WorkspaceRequest):
    target: str


class TargetItem(BaseModel):
    label: str
    detail: str
    kind: str
    full_label: str


class TargetsResponse(BaseModel):
    targets: List[TargetItem]


class TaskItem(BaseModel):
    name: str
    command: str
    group: str
    target: Optional[str] = None


class TasksResponse(BaseModel):
    tasks: List[TaskItem]


class CppConfigResponse(BaseModel):
    status: str
    path: Optional[str] = None
    configuration_name: Optional[str] = None
    created: Optional[bool] = None


class JavaConfigResponse(BaseModel):
    status: str
    classpath: Optional[str] = None
    project: Optional[str] = None
    settings_created: Optional[bool] = None
    source_root: Optional[str] = None
    warnings: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


async def _in_executor(func: Callable[[], ResultT]) -> ResultT:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing bazelide operations."""

    app = FastAPI(title="bazelide", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/targets", response_model=TargetsResponse)
    async def targets(
        payload: TargetsRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> TargetsResponse:
        workspace = payload.properties()
        displays = await _in_executor(
            lambda: orchestrator.list_targets(workspace, payload.query, raw=payload.raw)
        )
        return TargetsResponse(
            targets=[
                TargetItem(
                    label=display.label,
                    detail=display.detail,
                    kind=display.record.kind.strip(),
                    full_label=display.record.label,
                )
                for display in displays
            ]
        )

    @app.post("/tasks", response_model=TasksResponse)
    async def tasks(
        payload: WorkspaceRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> TasksResponse:
        workspace = payload.properties()
        found = await _in_executor(lambda: orchestrator.list_tasks(workspace))
        return TasksResponse(
            tasks=[
                TaskItem(name=task.name, command=task.command, group=task.group.value, target=task.target)
                for task in found
            ]
        )

    @app.post("/cpp-config", response_model=CppConfigResponse)
    async def cpp_config(
        payload: TargetRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> CppConfigResponse:
        workspace = payload.properties()
        result = await _in_executor(
            lambda: orchestrator.generate_cpp_config(workspace, payload.target)
        )
        if result is None or not result.written:
            return CppConfigResponse(status="skipped")
        return CppConfigResponse(
            status="ok",
            path=str(result.path),
            configuration_name=result.configuration_name,
            created=result.created,
        )

    @app.post("/java-config", response_model=JavaConfigResponse)
    async def java_config(
        payload: TargetRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> JavaConfigResponse:
        workspace = payload.properties()
        result = await _in_executor(
            lambda: orchestrator.generate_java_config(workspace, payload.target)
        )
        if result is None:
            return JavaConfigResponse(status="skipped")
        return JavaConfigResponse(
            status="ok",
            classpath=str(result.classpath),
            project=str(result.project),
            settings_created=result.settings_created,
            source_root=result.source_root,
            warnings=result.warnings,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
