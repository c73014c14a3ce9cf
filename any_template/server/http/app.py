"""FastAPI application dispatching requests to template host run modes."""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse

from ..._embedding.errors import TemplateError
from ...host import TemplateHost
from .models import RunModeIndex

HostFactory = Callable[[], TemplateHost]


def create_app(host_factory: HostFactory) -> FastAPI:
    """Create a FastAPI app building one :class:`TemplateHost` per request."""

    app = FastAPI()
    app.include_router(create_run_mode_router(host_factory))
    return app


def create_run_mode_router(host_factory: HostFactory) -> APIRouter:
    router = APIRouter()

    def get_host(request: Request) -> TemplateHost:
        host = host_factory()
        host.query = dict(request.query_params)
        return host

    @router.get(
        "/run-modes",
        name="run-mode-index",
        response_model=RunModeIndex,
        summary="List the run modes and template backends of the host",
    )
    def list_run_modes(host: TemplateHost = Depends(get_host)) -> RunModeIndex:
        return RunModeIndex.from_host(host)

    @router.get(
        "/run/{name}",
        name="run-mode",
        response_class=HTMLResponse,
        summary="Run a run mode and return its rendered output",
    )
    async def execute_run_mode(
        name: str, host: TemplateHost = Depends(get_host)
    ) -> HTMLResponse:
        if host.resolve(name) is None:
            raise HTTPException(status_code=404, detail=f"Unknown run mode '{name}'")
        try:
            body = await run_in_threadpool(host.run, name)
        except TemplateError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return HTMLResponse(body)

    return router


__all__ = ["create_app", "create_run_mode_router"]
