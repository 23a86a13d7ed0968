"""HTTP page-fetch endpoint for the home feed.

Routes:
    GET /api/feed/home  - one feed page (query: page, limit, cursor, filter)
    GET /health         - liveness check
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import APIRouter, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from src.feed.orchestrator import FeedOrchestrator
from src.observability import bind_request_context, clear_request_context
from src.settings import FeedSettings
from src.store.protocols import FeedDataSource


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

router = APIRouter()


@router.get("/health", tags=["Health"])
def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/api/feed/home", tags=["Feed"])
def feed_home(
    request: Request,
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    cursor: str | None = Query(default=None),
    filter: str | None = Query(default=None),  # noqa: A002
) -> JSONResponse:
    """Serve one page of the home feed.

    Query values are parsed leniently: bad numbers fall back to defaults,
    unknown filters mean ``all`` and malformed cursors are ignored.
    """
    orchestrator = FeedOrchestrator(
        request.app.state.store,
        settings=request.app.state.settings,
        request_id=request.state.request_id,
    )
    status_code, body = orchestrator.handle(
        {"page": page, "limit": limit, "cursor": cursor, "filter": filter}
    )
    return JSONResponse(content=body, status_code=status_code)


def create_app(
    store: FeedDataSource,
    settings: FeedSettings | None = None,
) -> FastAPI:
    """Create the feed API application.

    Args:
        store: Read-only content store shared by all requests.
        settings: Feed settings (defaults from the environment).

    Returns:
        Configured FastAPI app.
    """
    app = FastAPI(
        title="Home Feed API",
        description="Paginated, ranked, diversity-constrained home feed.",
        version="0.1.0",
    )
    app.state.store = store
    app.state.settings = settings or FeedSettings()

    @app.middleware("http")
    async def request_context(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_request_context(request_id)
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"
        logger.info(
            "http_request",
            component="api",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response

    app.include_router(router)
    return app

