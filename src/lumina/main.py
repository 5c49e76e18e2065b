"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lumina import __version__
from lumina.analysis.static.ast_parser import grammar_available
from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.app_state import AppState
from lumina.api.middleware.auth import ApiKeyMiddleware
from lumina.api.routes import cache, health, visualize
from lumina.config import Settings
from lumina.logger import RequestLogger
from lumina.logging_config import setup_logging

_settings = Settings()
setup_logging(_settings.log_level)

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings

    # One cache per process, shared by all request threads
    parse_cache = ParseCache(settings.parse_cache_capacity)
    request_logger = RequestLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    app.state.typed = AppState(
        settings=settings,
        parse_cache=parse_cache,
        logger=request_logger,
    )

    if not grammar_available():
        _logger.warning(
            "event=grammar_unavailable action=all_parses_fail"
        )
    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=all_endpoints_public"
        )

    yield

    parse_cache.clear()


app = FastAPI(
    title="Lumina",
    description=(
        "Code structure visualizer --"
        " turns source text into call graphs and diagrams"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware (outermost) -> ApiKeyMiddleware -> Router
#
# CORS must be outermost so OPTIONS preflight is answered before
# ApiKeyMiddleware rejects for missing X-API-Key.
app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(visualize.router)
app.include_router(cache.router)
