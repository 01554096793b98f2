"""FastAPI application entrypoint for architect service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ArchitectConfig, load_config
from ..errors import ArchitectError, NetworkError, NoWorkspaceError
from ..models import AnalysisMode
from ..orchestrator import Orchestrator


class AnalyzeRequest(BaseModel):
    path: str
    mode: AnalysisMode = AnalysisMode.SUMMARY_EN


class AnalyzeResponse(BaseModel):
    status: str
    mode: str
    report: Optional[str] = None
    file_count: int = 0
    skipped: List[str] = []


class CommitRequest(BaseModel):
    path: str


class CommitResponse(BaseModel):
    status: str
    message: Optional[str] = None
    conventional: Optional[bool] = None
    diff_source: Optional[str] = None
    truncated: bool = False


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
    config_loader: Callable[[Path], ArchitectConfig] = load_config,
) -> FastAPI:
    """Create the FastAPI application exposing the analysis and commit flows."""

    app = FastAPI(title="Project Architect Service", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        # Fresh instance per request; flows share no state.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        config = config_loader(Path(payload.path))
        outcome = await orchestrator.run_analysis(payload.path, payload.mode, config)
        return AnalyzeResponse(
            status=outcome.status,
            mode=outcome.mode.value,
            report=outcome.report,
            file_count=outcome.file_count,
            skipped=outcome.skipped,
        )

    @app.post("/commit", response_model=CommitResponse)
    async def commit(
        payload: CommitRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> CommitResponse:
        config = config_loader(Path(payload.path))
        outcome = await orchestrator.run_commit(payload.path, config)
        message = outcome.message
        return CommitResponse(
            status=outcome.status,
            message=message.text if message else None,
            conventional=message.is_conventional if message else None,
            diff_source=outcome.diff_source,
            truncated=outcome.truncated,
        )

    @app.exception_handler(NoWorkspaceError)
    async def no_workspace_handler(_: Any, exc: NoWorkspaceError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NetworkError)
    async def network_error_handler(_: Any, exc: NetworkError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(ArchitectError)
    async def architect_error_handler(_: Any, exc: ArchitectError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
