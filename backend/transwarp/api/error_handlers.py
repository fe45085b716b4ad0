"""Error Handlers — terminal error translation for every request.

Invariants:
    - APIError → its own {error, data, message} payload and status, in every mode
    - RequestValidationError → APIError payload "parameter:invalid" (400)
    - Other exceptions in production → plain 500, detail only in the server log
    - Other exceptions in development → propagated (debug traceback page)

Design Decisions:
    - Catch-all registered only in production: development keeps FastAPI's debug
      page and the re-raised exception for the developer
    - api_error_response() shared with the request pipeline, so stage errors and
      handler errors produce identical responses
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from transwarp.core.errors import APIError, invalid_param

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, production_mode: bool) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    if production_mode:
        _register_generic_error_handler(app)


def api_error_response(request: Request, exc: APIError) -> JSONResponse:
    logger.warning(
        f"send api error to client: {exc.error}",
        extra={"error_code": exc.error, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _register_api_error_handler(app: FastAPI) -> None:
    """Register structured API error handler."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return api_error_response(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return api_error_response(request, _validation_to_api_error(exc))


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler (production only)."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"ERROR >>> {exc}",
            extra={"path": request.url.path},
            exc_info=True,
        )
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _validation_to_api_error(exc: RequestValidationError) -> APIError:
    errors = exc.errors()
    if not errors:
        return invalid_param("request")
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else "request"
    return invalid_param(field, first.get("msg", ""))
