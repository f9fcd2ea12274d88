"""FastAPI application serving scraped weather data."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from skyscrape import LAST_UPDATED, __version__
from skyscrape.api.errors import error_response, register_error_handlers, skyscrape_error_response
from skyscrape.api.gate import AdmissionGate, default_gates
from skyscrape.config import Settings
from skyscrape.core import SelectorHealthMonitor, WeatherPipeline, create_monitor, create_pipeline
from skyscrape.exceptions import CorsDeniedError, RateLimitedError, SkyscrapeError

logger = logging.getLogger(__name__)

WEATHER_PREFIX = '/api/weather'

# Rejection code per admission scope
RATE_LIMIT_CODES = {
    'weather': 'RATE_LIMIT_EXCEEDED',
    'default': 'TOO_MANY_REQUESTS',
}


def client_key(request: Request) -> str:
    """Identify the caller: API key, then first forwarded address, then peer address."""
    api_key = request.headers.get('x-api-key')
    if api_key:
        return api_key
    forwarded = request.headers.get('x-forwarded-for')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.client.host if request.client else 'unknown'


def create_app(
    settings: Settings,
    pipeline: WeatherPipeline | None = None,
    monitor: SelectorHealthMonitor | None = None,
    gates: dict[str, AdmissionGate] | None = None,
) -> FastAPI:
    """Create the API application.

    Args:
        settings: Validated settings
        pipeline: Weather pipeline. Built from settings if omitted.
        monitor: Selector health monitor. Built from settings if omitted.
            It runs for the app's lifetime when ``settings.selector_check_enabled``.
        gates: Admission gates keyed by scope ('weather', 'default').
            Defaults to in-memory rate limiters.

    Returns:
        The FastAPI app

    """
    pipeline = pipeline or create_pipeline(settings)
    monitor = monitor or create_monitor(settings)
    gates = gates if gates is not None else default_gates()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.selector_check_enabled:
            monitor.start()
        try:
            yield
        finally:
            await asyncio.to_thread(monitor.stop)

    app = FastAPI(title='Skyscrape Weather API', version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.pipeline = pipeline
    app.state.monitor = monitor
    app.state.gates = gates

    register_error_handlers(app)

    @app.middleware('http')
    async def admission_gate(request: Request, call_next):
        scope = 'weather' if request.url.path.startswith(WEATHER_PREFIX) else 'default'
        gate = gates.get(scope)
        if gate is None:
            return await call_next(request)

        key = client_key(request)
        if gate.admit(key):
            response = await call_next(request)
        else:
            logger.info(f'Rate limited {scope} request from {key}')
            response = skyscrape_error_response(RateLimitedError(gate.retry_after, code=RATE_LIMIT_CODES[scope]))
        response.headers.update(gate.rate_limit_headers(key))
        return response

    if settings.allowed_origins:
        allowed = set(settings.allowed_origins)

        @app.middleware('http')
        async def origin_check(request: Request, call_next):
            origin = request.headers.get('origin')
            if origin and origin not in allowed:
                error = CorsDeniedError(f'Origin {origin} not allowed')
                return error_response(error.status_code, error.message, error.code)
            return await call_next(request)

        app.add_middleware(CORSMiddleware, allow_origins=list(settings.allowed_origins), allow_methods=['GET'])

    @app.get('/api/weather/{city}')
    def get_weather(city: str) -> dict[str, str]:
        try:
            record = pipeline.get_weather(city)
        except SkyscrapeError:
            raise
        except Exception as e:
            logger.exception(f'Server error while fetching weather for {city!r}')
            raise SkyscrapeError(str(e)) from e
        return record.to_response()

    @app.get('/config')
    def get_config() -> dict[str, Any]:
        return {
            'RECENT_SEARCH_LIMIT': settings.recent_search_limit,
            'API_URL': settings.api_url,
        }

    @app.get('/api/version')
    def get_version() -> dict[str, str]:
        return {'version': __version__, 'lastUpdated': LAST_UPDATED}

    @app.get('/api/health/selectors')
    def get_selector_health() -> dict[str, Any]:
        report = monitor.last_report
        if report is None:
            return {'status': 'pending'}
        return report.to_response()

    return app
