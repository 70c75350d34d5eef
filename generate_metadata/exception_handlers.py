"""
Exception Handlers for generate-metadata

Turns library exceptions into the webhook JSON error format:

{
    "ok": false,
    "error": "Failed to revalidate",
    "metadata": {"message": "..."}
}

``metadata`` is only present when the exception carries details.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from generate_metadata.exceptions import GenerateMetadataError

logger = logging.getLogger(__name__)


def create_error_response(exc: GenerateMetadataError) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        exc: The library exception to serialize

    Returns:
        JSONResponse carrying the exception's status code
    """
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def generate_metadata_exception_handler(request: Request, exc: GenerateMetadataError) -> JSONResponse:
    """Handle library exceptions raised inside a FastAPI application."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__}: {exc.message} ({request.method} {request.url.path})")
    return create_error_response(exc)


def register_exception_handlers(app) -> None:
    """
    Register the library's exception handlers with a FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(GenerateMetadataError, generate_metadata_exception_handler)
    logger.debug("generate-metadata exception handlers registered")
