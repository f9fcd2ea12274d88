"""JSON error responses for the HTTP API."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skyscrape.exceptions import RateLimitedError, SkyscrapeError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard error body ``{error, code, statusCode, timestamp, details?}``."""
    body: dict[str, Any] = {
        'error': message,
        'code': code,
        'statusCode': status_code,
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
    if details is not None:
        body['details'] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def skyscrape_error_response(error: SkyscrapeError) -> JSONResponse:
    """Map a taxonomy error to its status, code and fixed message."""
    if isinstance(error, RateLimitedError):
        return error_response(
            error.status_code,
            error.message,
            error.code,
            details={'retryAfter': f'{error.retry_after} seconds'},
            headers={'Retry-After': str(error.retry_after)},
        )
    return error_response(error.status_code, error.message, error.code)


async def handle_skyscrape_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, SkyscrapeError)
    if exc.status_code >= 500:
        logger.error(f'{exc.code} on {request.url.path}: {exc}')
    else:
        logger.info(f'{exc.code} on {request.url.path}: {exc}')
    return skyscrape_error_response(exc)


async def handle_http_exception(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StarletteHTTPException)
    if exc.status_code == 404:
        return error_response(404, 'Route not found.', 'ROUTE_NOT_FOUND')
    if exc.status_code == 405:
        return error_response(405, 'Method not allowed.', 'METHOD_NOT_ALLOWED')
    return error_response(exc.status_code, str(exc.detail), 'HTTP_ERROR')


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f'Unhandled error on {request.url.path}')
    return error_response(500, 'Internal server error.', 'UNHANDLED_EXCEPTION')


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an app."""
    app.add_exception_handler(SkyscrapeError, handle_skyscrape_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
