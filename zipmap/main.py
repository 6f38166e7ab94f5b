"""Application factory and top-level wiring.

Everything with a connection or a warm-up cost (database engine, pooled HTTP
client, timezone polygons, lookup caches) is built once per process by
``init_state`` and parked on ``app.state``; routes reach it through FastAPI
dependencies. Under uvicorn the lifespan calls it; under Lambda the handler
does, since Mangum runs without a lifespan.

Run locally with ``python -m zipmap.main`` or ``uvicorn zipmap.main:app --reload``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from cachetools import TTLCache
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.errors import ApiError, api_error_handler, http_exception_handler, unhandled_exception_handler
from .core.logging import configure_logging
from .core.settings import AppSettings, get_settings
from .db.session import Base, build_engine, build_session_factory
from .middlewares import CorsHeadersMiddleware, RequestIdMiddleware
from .models import user as _user  # noqa: F401
from .routers import health, lookups, users
from .services.openweather import OpenWeatherClient
from .services.places import GeoapifyPlacesClient
from .services.timezones import CoordinateTimezoneResolver
from .services.upstream import build_http_client

logger = logging.getLogger(__name__)


def build_lookup_clients(app: FastAPI, settings: AppSettings, http: httpx.AsyncClient) -> None:
    app.state.weather_client = OpenWeatherClient(
        http,
        api_key=settings.OPENWEATHERMAP_API_KEY,
        url=settings.OPENWEATHERMAP_URL,
        timezone_resolver=CoordinateTimezoneResolver(),
        geo_cache=TTLCache(maxsize=settings.LOOKUP_CACHE_MAXSIZE, ttl=settings.GEO_CACHE_TTL_SECONDS),
    )
    app.state.places_client = GeoapifyPlacesClient(
        http,
        api_key=settings.GEOAPIFY_API_KEY,
        url=settings.GEOAPIFY_PLACES_URL,
        cache=TTLCache(maxsize=settings.LOOKUP_CACHE_MAXSIZE, ttl=settings.PLACES_CACHE_TTL_SECONDS),
    )


def init_state(app: FastAPI) -> None:
    """Build the process-wide resources on ``app.state`` unless they already exist.

    Lambda keeps the process warm between invocations, so whatever is built
    here (and the lookup caches in particular) must outlive a single request.
    """
    if getattr(app.state, "session_factory", None) is not None:
        return
    settings: AppSettings = app.state.settings
    if not settings.DB_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)

    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    http = build_http_client(settings.HTTP_TIMEOUT_SECONDS)
    app.state.http = http
    build_lookup_clients(app, settings, http)
    for name, key in (
        ("OPENWEATHERMAP_API_KEY", settings.OPENWEATHERMAP_API_KEY),
        ("GEOAPIFY_API_KEY", settings.GEOAPIFY_API_KEY),
    ):
        if not key:
            logger.warning("%s is not set; lookups that need it will fail", name)
    logger.info("Starting %s in %s mode", settings.APP_NAME, settings.APP_ENV)


async def close_state(app: FastAPI) -> None:
    http = getattr(app.state, "http", None)
    if http is not None:
        await http.aclose()
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        engine.dispose()
    for name in ("http", "engine", "session_factory", "weather_client", "places_client"):
        if hasattr(app.state, name):
            delattr(app.state, name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_state(app)
    try:
        yield
    finally:
        await close_state(app)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, service=settings.APP_NAME, environment=settings.APP_ENV)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(CorsHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(lookups.router)

    Instrumentator().instrument(app).expose(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
