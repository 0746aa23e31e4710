"""
HTTP interface of the changelog generator (FastAPI).

Routes:
    POST   /api/changelogs/generate   generate a changelog (guests allowed)
    GET    /api/changelogs            list saved changelogs
    POST   /api/changelogs            save a changelog
    GET    /api/changelogs/{id}       fetch a saved changelog
    DELETE /api/changelogs/{id}       delete a saved changelog
    POST   /api/github/tags           list tags of a repository (guests allowed)
    GET    /health
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import optional_user, require_user
from .config import ChangelogSettings, get_settings
from .errors import GenerationBackendError, UpstreamFetchError, ValidationError
from .fetcher import GitHubFetcher
from .generator import ChangelogWriter
from .pipeline import ChangelogPipeline, FetcherFactory
from .schemas import SaveChangelogRequest, TagsRequest, parse_body, parse_generation_request
from .storage import InMemoryChangelogStore

logger = logging.getLogger("changelog-generator.api")

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        body: Dict[str, Any] = {"message": exc.message}
        if exc.field:
            body["field"] = exc.field
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(RequestValidationError)
    async def _malformed_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(UpstreamFetchError)
    async def _upstream_error(request: Request, exc: UpstreamFetchError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": f"GitHub API Error: {exc.body}"})

    @app.exception_handler(GenerationBackendError)
    async def _backend_error(request: Request, exc: GenerationBackendError) -> JSONResponse:
        # provider details stay in the server log
        logger.error("Generate error: %s", exc)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


def create_app(
    settings: Optional[ChangelogSettings] = None,
    pipeline: Optional[ChangelogPipeline] = None,
    store: Optional[InMemoryChangelogStore] = None,
    fetcher_factory: Optional[FetcherFactory] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Deployment settings; defaults to the process-wide ones
        pipeline: Generation pipeline; built from the settings when omitted
        store: Saved changelog store; a fresh in-memory store when omitted
        fetcher_factory: Builds GitHub fetchers for the pipeline and the tags route
    """
    settings = settings or get_settings()
    if fetcher_factory is None:
        def fetcher_factory(token: Optional[str]) -> GitHubFetcher:
            return GitHubFetcher(token=token, settings=settings)
    if pipeline is None:
        pipeline = ChangelogPipeline(ChangelogWriter(settings=settings), fetcher_factory=fetcher_factory)
    store = store or InMemoryChangelogStore()

    app = FastAPI(title="Changelog Generator")
    _register_error_handlers(app)

    changelogs = APIRouter(prefix="/api/changelogs", tags=["Changelogs"])
    github = APIRouter(prefix="/api/github", tags=["GitHub"])

    @changelogs.post("/generate")
    def generate_changelog(
        payload: Any = Body(default=None),
        user_id: Optional[str] = Depends(optional_user),
    ) -> Dict[str, str]:
        """Generate a changelog from manual text or a GitHub commit range."""
        request = parse_generation_request(payload)
        logger.info("Generate request (%s) from %s", request.source_type.value, user_id or "guest")
        return pipeline.generate(request).to_dict()

    @changelogs.get("")
    def list_changelogs(user_id: str = Depends(require_user)) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in store.list(user_id)]

    @changelogs.post("", status_code=201)
    def save_changelog(
        payload: Any = Body(default=None),
        user_id: str = Depends(require_user),
    ) -> Dict[str, Any]:
        data = parse_body(SaveChangelogRequest, payload)
        return store.create(user_id, data).to_dict()

    @changelogs.get("/{changelog_id}")
    def get_changelog(changelog_id: int, user_id: str = Depends(require_user)) -> Dict[str, Any]:
        record = store.get(changelog_id)
        if record is None or record.user_id != user_id:
            raise HTTPException(status_code=404, detail="Not found")
        return record.to_dict()

    @changelogs.delete("/{changelog_id}", status_code=204)
    def delete_changelog(changelog_id: int, user_id: str = Depends(require_user)) -> Response:
        record = store.get(changelog_id)
        if record is None or record.user_id != user_id:
            raise HTTPException(status_code=404, detail="Not found")
        store.delete(changelog_id)
        return Response(status_code=204)

    @github.post("/tags")
    def list_tags(
        payload: Any = Body(default=None),
        user_id: Optional[str] = Depends(optional_user),
    ) -> List[str]:
        """List tag names of a repository, to pick a commit range."""
        data = parse_body(TagsRequest, payload)
        logger.debug("Tags request for %s/%s from %s", data.owner, data.repo, user_id or "guest")
        return fetcher_factory(data.token).fetch_tags(data.owner, data.repo)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    app.include_router(changelogs)
    app.include_router(github)
    return app
