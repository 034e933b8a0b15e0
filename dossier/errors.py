"""Error taxonomy for the roster API and the handlers that render it.

Every handled error becomes ``{"error": "<message>"}``. Storage failures and
anything unexpected are logged with a traceback and answered with a generic
message so driver or SQL details never reach the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
GENERIC_ERROR = "Internal server error"


class DossierError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPayloadError(DossierError):
    """A required field is missing or has the wrong type."""

    status_code = status.HTTP_400_BAD_REQUEST


class PersonNotFoundError(DossierError):
    """No record matches the requested id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, person_id: int | None = None) -> None:
        super().__init__("Person not found")
        self.person_id = person_id


class StorageError(DossierError):
    """The underlying table call failed."""


def is_api_path(request: Request) -> bool:
    return request.url.path.startswith(API_PREFIX)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def spa_shell_response() -> Response:
    index = get_settings().public_dir / "index.html"
    if not index.is_file():
        return PlainTextResponse("Not found", status_code=status.HTTP_404_NOT_FOUND)
    return FileResponse(index, headers={"Cache-Control": "no-store"})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(
        str(part)
        for part in first.get("loc", ())
        if part not in ("body", "path", "query")
    )
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> FastAPI:
    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> Response:
        logger.error(
            "storage.error",
            extra={"path": request.url.path, "error": exc.message},
        )
        if is_api_path(request):
            return error_response(exc.status_code, GENERIC_ERROR)
        return PlainTextResponse(GENERIC_ERROR, status_code=exc.status_code)

    @app.exception_handler(DossierError)
    async def dossier_error_handler(request: Request, exc: DossierError) -> Response:
        logger.info(
            "request.rejected",
            extra={
                "path": request.url.path,
                "status": exc.status_code,
                "error": exc.message,
            },
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        return error_response(
            status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        unmatched = (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED)
        if is_api_path(request) and exc.status_code in unmatched:
            return error_response(status.HTTP_404_NOT_FOUND, "Not found")
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            if request.method in ("GET", "HEAD"):
                return spa_shell_response()
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unexpected server error", extra={"path": request.url.path})
        if is_api_path(request):
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)
        return PlainTextResponse(
            GENERIC_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return app
