"""
app/core/errors.py

Purpose: Exception handlers

- JSON ErrorResponse bodies for API callers
- Page requests without a session are sent to the sign-in page
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import AdvancedBankError, AuthenticationError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)


def _wants_html(request: Request) -> bool:
    if request.url.path.startswith(settings.API_PREFIX):
        return False
    return "text/html" in request.headers.get("accept", "")


def _error_json(status_code: int, error: str, code: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(AdvancedBankError)
    async def application_exception_handler(request: Request, exc: AdvancedBankError):
        if isinstance(exc, AuthenticationError) and _wants_html(request):
            return RedirectResponse(url="/sign-in", status_code=303)

        return _error_json(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return _error_json(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles pydantic validation errors on request bodies.
        """
        return _error_json(
            422,
            "Input validation failed",
            "VALIDATION_ERROR",
            # ctx may hold the raised exception object, which is not JSON-safe
            details=[
                {key: value for key, value in err.items() if key != "ctx"}
                for err in exc.errors()
            ]
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return _error_json(500, message, "INTERNAL_ERROR")
