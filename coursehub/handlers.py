"""
Application exception handlers.

Every failure reaches the client as ``{"success": false, "message": ...}``.
Failed authentication keeps its 401 status; all other errors are reported
with status 200 and the client branches on the ``success`` flag.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.utils import error_response, APIException

logger = logging.getLogger(__name__)


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Render an APIException as the uniform failure body."""
    status_code = (
        status.HTTP_401_UNAUTHORIZED
        if exc.status_code == status.HTTP_401_UNAUTHORIZED
        else status.HTTP_200_OK
    )

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=error_response(exc.message, code=exc.code),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request fields."""
    logger.debug(f"Validation failed for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=error_response("Invalid Details", code="INVALID_INPUT"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their details from the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=error_response("Something went wrong", code="INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
