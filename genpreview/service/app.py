"""FastAPI application entrypoint for genpreview service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, PreviewConfig, load_config
from ..models import PageRecord, ProjectDescriptor
from ..pages import assemble_pages, project_overview_document
from ..recovery import RecoveryError, recover


class RecoverRequest(BaseModel):
    text: str


class PagesRequest(BaseModel):
    text: str
    workers: Optional[int] = None


class FileModel(BaseModel):
    path: str
    content: str
    kind: str
    language: str


class EnvVarModel(BaseModel):
    key: str
    description: str = ""
    example: Optional[str] = None
    required: bool = False


class ProjectResponse(BaseModel):
    name: str
    description: str
    kind: str
    files: List[FileModel]
    dependencies: Dict[str, str]
    dev_dependencies: Dict[str, str]
    env_vars: List[EnvVarModel]
    setup_steps: List[str]


class PageModel(BaseModel):
    slug: str
    title: str
    order: int
    is_homepage: bool
    source_path: str
    used_fallback: bool
    description: Optional[str] = None
    meta_title: Optional[str] = None
    html_document: str


class PagesResponse(BaseModel):
    project: str
    pages: List[PageModel]
    overview: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def project_response(project: ProjectDescriptor) -> ProjectResponse:
    return ProjectResponse(
        name=project.name,
        description=project.description,
        kind=project.kind.value,
        files=[
            FileModel(
                path=entry.path,
                content=entry.content,
                kind=entry.inferred_kind.value,
                language=entry.language,
            )
            for entry in project.files
        ],
        dependencies=dict(project.dependencies),
        dev_dependencies=dict(project.dev_dependencies),
        env_vars=[
            EnvVarModel(
                key=env_var.key,
                description=env_var.description,
                example=env_var.example,
                required=env_var.required,
            )
            for env_var in project.env_vars
        ],
        setup_steps=list(project.setup_steps),
    )


def page_model(page: PageRecord) -> PageModel:
    return PageModel(
        slug=page.slug,
        title=page.title,
        order=page.order,
        is_homepage=page.is_homepage,
        source_path=page.source_path,
        used_fallback=page.used_fallback,
        description=page.description,
        meta_title=page.meta_title,
        html_document=page.html_document,
    )


def _default_settings() -> PreviewConfig:
    return load_config(Path.cwd())


def create_app(
    settings_factory: Callable[[], PreviewConfig] = _default_settings,
) -> FastAPI:
    """Create the FastAPI application exposing genpreview operations."""

    app = FastAPI(title="GenPreview Service", version="0.1.0")

    async def get_settings() -> PreviewConfig:
        # Re-read per request so config edits apply without a restart.
        return settings_factory()

    async def _in_executor(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/recover", response_model=ProjectResponse)
    async def recover_project(payload: RecoverRequest) -> ProjectResponse:
        project = await _in_executor(lambda: recover(payload.text))
        return project_response(project)

    @app.post("/pages", response_model=PagesResponse)
    async def build_pages(
        payload: PagesRequest,
        settings: PreviewConfig = Depends(get_settings),
    ) -> PagesResponse:
        def _run() -> PagesResponse:
            project = recover(payload.text)
            pages = assemble_pages(project, settings=settings, workers=payload.workers)
            overview = None if pages else project_overview_document(project, settings=settings)
            return PagesResponse(
                project=project.name,
                pages=[page_model(page) for page in pages],
                overview=overview,
            )

        return await _in_executor(_run)

    @app.exception_handler(RecoveryError)
    async def recovery_error_handler(_: Any, exc: RecoveryError) -> JSONResponse:
        content = {"detail": str(exc), "kind": exc.kind}
        snippet = getattr(exc, "context_snippet", None)
        if snippet:
            content["context_snippet"] = snippet
        return JSONResponse(status_code=422, content=content)

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
