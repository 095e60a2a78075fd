"""
Global error handling middleware.

WHAT: Translate exceptions to {"error": ...} HTTP responses
WHY: Users get a generic message; operators get the detail in the logs
HOW: FastAPI exception handlers for validation and pipeline exceptions
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..utils.exceptions import (
    PipelineError,
    ConfigurationError,
    UpstreamError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An internal server error occurred. Please try again later."


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Handle FastAPI RequestValidationError.

    WHAT: Request validation failed
    WHY: Invalid request payload
    HOW: Return 400 with field errors
    """
    logger.warning(f"Validation error: {exc.errors()}")

    # Clean up error details to be JSON serializable
    cleaned_errors = []
    for error in exc.errors():
        cleaned_errors.append({
            "type": error.get("type"),
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg"),
        })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request",
            "details": cleaned_errors,
        }
    )


async def pipeline_error_handler(request: Request, exc: PipelineError):
    """
    Handle PipelineError escaping an endpoint.

    WHAT: Configuration, upstream, parse or schema failure
    WHY: Provider detail and raw generated text must not reach the user
    HOW: Log code and message, return a generic body (502 for upstream, 500 otherwise)
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, UpstreamError):
        status_code = status.HTTP_502_BAD_GATEWAY

    if isinstance(exc, ConfigurationError):
        logger.critical(f"Configuration error on {request.url.path}: {exc.message}")
    else:
        logger.error(f"Pipeline error on {request.url.path}: {exc.code} - {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={"error": GENERIC_ERROR_MESSAGE}
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PipelineError, pipeline_error_handler)

    logger.info("Exception handlers registered")
