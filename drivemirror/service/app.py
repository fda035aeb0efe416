"""FastAPI application entrypoint for drivemirror service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import (
    AuthFailure,
    Cancelled,
    ConfigError,
    InvalidRequest,
    MirrorError,
    NameConflict,
    NotFound,
    PathCollision,
    RemoteServiceError,
    StructuralError,
)
from ..models import PublishResult
from ..orchestrator import Orchestrator


class MirrorRequest(BaseModel):
    source: str
    repo_name: str
    google_token: str
    github_token: str


class MirrorResponse(BaseModel):
    status: str
    repository_url: Optional[str] = None
    files_published: int = 0


class HealthResponse(BaseModel):
    status: str


_STATUS_BY_ERROR: tuple[tuple[type[MirrorError], int], ...] = (
    (NotFound, 404),
    (AuthFailure, 401),
    (NameConflict, 409),
    (PathCollision, 422),
    (StructuralError, 422),
    (Cancelled, 499),
    (ConfigError, 400),
    (InvalidRequest, 400),
    (RemoteServiceError, 502),
)


def status_for_error(exc: MirrorError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the mirror pipeline."""

    app = FastAPI(title="DriveMirror Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/mirror", response_model=MirrorResponse)
    async def mirror(
        payload: MirrorRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> MirrorResponse:
        def _run_mirror() -> PublishResult | None:
            return orchestrator.run(
                payload.source,
                payload.repo_name,
                google_token=payload.google_token,
                github_token=payload.github_token,
            )

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_mirror)

        if result is None:
            return MirrorResponse(status="empty")
        return MirrorResponse(
            status="ok",
            repository_url=result.repository_url,
            files_published=result.files_published,
        )

    @app.exception_handler(MirrorError)
    async def mirror_error_handler(_: Any, exc: MirrorError) -> JSONResponse:
        return JSONResponse(
            status_code=status_for_error(exc),
            content={
                "kind": exc.kind,
                "detail": exc.message,
                "stage": exc.stage,
                "path": exc.path,
                "partial_repository": exc.partial_repository,
                "remote_payload": exc.payload,
            },
        )

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
