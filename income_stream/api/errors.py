"""Error responses for the API.

Every failure is answered with a JSON body of the form {"error": "<message>"}:
400 for validation problems, 404 for missing records, 500 for anything else.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from income_stream.exceptions import DomainError, NotFoundError, QuoteProviderError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def error_response(message: str, **kwargs: Any) -> Dict[str, Any]:
    """Build the standard error body, with optional extra fields."""
    response: Dict[str, Any] = {"error": message}
    response.update(kwargs)
    return response


def _describe_validation_errors(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return messages


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_response(exc.message, **exc.details))


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=error_response(exc.message, **exc.details))


async def _quote_provider_error(request: Request, exc: QuoteProviderError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=error_response("Failed to fetch market data"))


async def _domain_error(request: Request, exc: DomainError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=error_response(INTERNAL_ERROR))


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _describe_validation_errors(exc)
    message = details[0] if len(details) == 1 else "Invalid request"
    return JSONResponse(status_code=400, content=error_response(message, details=details))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_response(str(exc.detail)))


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_response(INTERNAL_ERROR))


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and framework exceptions onto the error body."""
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(QuoteProviderError, _quote_provider_error)
    app.add_exception_handler(DomainError, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
