"""FastAPI application exposing repository state over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..adapters import VCS, RemoteVCS
from ..errors import CapabilityError, NotFoundError, VCSError
from ..factory import ProbeCache, detect_tool, new_remote_vcs, new_vcs
from ..inspector import RepositoryInspector, RepoState


class StateRequest(BaseModel):
    path: str
    vcs: Optional[str] = None
    online: bool = True


class StateResponse(BaseModel):
    tool: str
    path: str
    status: str
    branch: str
    clean: bool
    default_branch: str
    default_branch_source: str
    stash: Optional[str] = None
    remote_url: Optional[str] = None
    local_revision: Optional[str] = None
    remote_revision: Optional[str] = None
    local_contains_remote: Optional[bool] = None
    up_to_date: Optional[bool] = None
    no_remote: bool = False
    remote_not_found: bool = False
    remote_error: Optional[str] = None


class RemoteRequest(BaseModel):
    url: str
    vcs: str = "git"


class RemoteResponse(BaseModel):
    url: str
    branch: str
    revision: str


class HealthResponse(BaseModel):
    status: str


VCSFactory = Callable[[str], VCS]
RemoteVCSFactory = Callable[[str], RemoteVCS]


def create_app(
    vcs_factory: Optional[VCSFactory] = None,
    remote_factory: Optional[RemoteVCSFactory] = None,
    *,
    probes: Optional[ProbeCache] = None,
) -> FastAPI:
    """Create the FastAPI application exposing vcsstate queries.

    Without explicit factories, adapters come from :func:`new_vcs` and
    :func:`new_remote_vcs` fed by one :class:`ProbeCache`, so each tool binary
    is probed at most once for the lifetime of the app.
    """

    app = FastAPI(title="vcsstate", version="0.1.0")
    probe_cache = probes or ProbeCache()

    def probed_vcs(tool: str) -> VCS:
        return new_vcs(tool, probe=probe_cache.get(tool))

    def probed_remote(tool: str) -> RemoteVCS:
        return new_remote_vcs(tool, probe=probe_cache.get(tool))

    local_factory: VCSFactory = vcs_factory or probed_vcs
    url_factory: RemoteVCSFactory = remote_factory or probed_remote

    async def get_vcs_factory() -> VCSFactory:
        return local_factory

    async def get_remote_factory() -> RemoteVCSFactory:
        return url_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/state", response_model=StateResponse)
    async def repository_state(
        payload: StateRequest,
        factory: VCSFactory = Depends(get_vcs_factory),
    ) -> StateResponse:
        tool = payload.vcs or detect_tool(payload.path)
        if tool is None:
            raise HTTPException(status_code=400, detail=f"no repository found at {payload.path}")

        def _inspect() -> RepoState:
            return RepositoryInspector(factory(tool)).inspect(payload.path, online=payload.online)

        state = await asyncio.get_running_loop().run_in_executor(None, _inspect)
        return StateResponse(**state.to_dict())

    @app.post("/remote", response_model=RemoteResponse)
    async def remote_state(
        payload: RemoteRequest,
        factory: RemoteVCSFactory = Depends(get_remote_factory),
    ) -> RemoteResponse:
        def _query() -> RemoteResponse:
            branch, revision = factory(payload.vcs).remote_branch_and_revision(payload.url)
            return RemoteResponse(url=payload.url, branch=branch, revision=revision)

        return await asyncio.get_running_loop().run_in_executor(None, _query)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_: Any, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CapabilityError)
    async def capability_handler(_: Any, exc: CapabilityError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(VCSError)
    async def vcs_error_handler(_: Any, exc: VCSError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
