import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.types import Scope

from . import __version__
from .config import get_settings
from .database import dispose_engine
from .errors import is_api_path, register_exception_handlers
from .health import router as health_router
from .logging import configure_logging
from .observability.metrics import REGISTRY, REQUESTS
from .observability.tracing import configure_tracing
from .routes.people import router as people_router

logger = logging.getLogger(__name__)


class NoCacheStaticFiles(StaticFiles):
    """Static files that are always re-fetched by the browser."""

    def file_response(
        self,
        full_path: str | os.PathLike[str],
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = FileResponse(
            full_path, status_code=status_code, stat_result=stat_result
        )
        response.headers["Cache-Control"] = "no-store"
        for header in ("etag", "last-modified"):
            if header in response.headers:
                del response.headers[header]
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level, service_name=settings.service_name)
    configure_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
    logger.info("dossier-api.start", extra={"env": settings.env, "port": settings.port})
    yield
    await dispose_engine()
    logger.info("dossier-api.stop")


app = FastAPI(lifespan=lifespan, title="Dossier API", version=__version__)

settings = get_settings()

register_exception_handlers(app)


def _metrics_path(request: Request) -> str:
    route = request.scope.get("route")
    route_path = getattr(route, "path", "")
    if route_path:
        return route_path
    return "/api/*" if is_api_path(request) else "/*"


@app.middleware("http")
async def metrics_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    response: Response = await call_next(request)
    if is_api_path(request):
        response.headers["Cache-Control"] = "no-store"
    try:
        REQUESTS.labels(
            request.method, _metrics_path(request), str(response.status_code)
        ).inc()
    except Exception:
        logger.warning("Failed to update metrics", exc_info=True)
    return response


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


app.include_router(health_router)
app.include_router(people_router)

# Registered last so API routes win; unknown paths fall through to the SPA shell
app.mount(
    "/",
    NoCacheStaticFiles(directory=settings.public_dir, html=True, check_dir=False),
    name="public",
)
