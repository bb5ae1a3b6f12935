"""
FastAPI application serving the dashboard document.

Every request, whatever its method or path, returns the freshly
aggregated document as JSON. Responses are open to any origin and
cacheable by a CDN for five minutes, with a longer stale-while-revalidate
window.
"""

import logging
import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hq import __version__
from hq.core.aggregator import Aggregator
from hq.core.config import HQConfig, load_config
from hq.core.exceptions import HQError, UpstreamFailureError
from hq.core.sources import get_source
from hq.core.store.models import Document

logger = logging.getLogger(__name__)

CACHE_CONTROL = "s-maxage=300, stale-while-revalidate=600"
RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": CACHE_CONTROL,
}
ERROR_MESSAGE = "Failed to fetch project data"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

DocumentBuilder = Callable[[], Awaitable[Document]]


def remote_builder(config: HQConfig) -> DocumentBuilder:
    """Builder that aggregates every tracked GitHub repository per request."""

    async def build() -> Document:
        source = get_source("github", config)
        try:
            return await Aggregator(source, config).build_document()
        finally:
            await source.aclose()

    return build


def create_app(config: HQConfig | None = None, builder: DocumentBuilder | None = None) -> FastAPI:
    """
    Create the API app.

    Args:
        config: Configuration (loaded from the usual layers when omitted)
        builder: Coroutine factory producing the document; defaults to a
            GitHub aggregation run

    Example:
        >>> app = create_app(builder=lambda: fake_build())
        >>> TestClient(app).get("/").status_code
        200
    """
    if builder is None:
        builder = remote_builder(config or load_config())

    app = FastAPI(
        title="HQ Command Center API",
        description="Aggregated checklist progress across tracked repositories",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HQError)
    @app.exception_handler(Exception)
    async def error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log the failure and return the error envelope."""
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            str(exc),
            traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": ERROR_MESSAGE, "message": str(exc)},
            headers={"Access-Control-Allow-Origin": "*"},
        )

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def serve_document(request: Request, path: str) -> JSONResponse:
        """Return the full dashboard document for any method and path."""
        try:
            document = await builder()
        except Exception as e:
            raise UpstreamFailureError(str(e)) from e
        logger.info(
            f"Served {len(document.projects)} projects for {request.method} /{path}"
        )
        return JSONResponse(content=document.to_json_dict(), headers=RESPONSE_HEADERS)

    return app
