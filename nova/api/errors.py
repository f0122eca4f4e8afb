"""
Exception handlers.

Maps domain exceptions and request validation failures to JSON error bodies.
Only applies before a streamed body has started; afterwards the stream is
simply ended.

Dependencies: fastapi, nova.core.exceptions
System role: Error-to-HTTP translation
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nova.core.exceptions import NovaException
from nova.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Request sections FastAPI prefixes onto error locations
LOCATION_SECTIONS = {"body", "query", "path", "header", "cookie"}


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{path, message}`` entries."""
    details = []
    for error in exc.errors():
        location = list(error.get("loc", ()))
        if location and location[0] in LOCATION_SECTIONS:
            location = location[1:]
        details.append({
            "path": ".".join(str(part) for part in location),
            "message": error.get("msg", "Invalid value"),
        })
    return details


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(exc)
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "errors": len(details)},
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": details},
    )


async def handle_nova_exception(request: Request, exc: NovaException) -> JSONResponse:
    """Translate a domain exception using its status code."""
    content: dict[str, object] = {"error": exc.message}
    code = getattr(exc, "code", None)
    if code:
        content["code"] = code

    if exc.status_code >= 500:
        log_exception_with_context(
            logger,
            "Request failed",
            exc,
            path=request.url.path,
            **exc.details,
        )
    else:
        logger.warning(
            f"Request rejected: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON error handlers on the application."""
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(NovaException, handle_nova_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
