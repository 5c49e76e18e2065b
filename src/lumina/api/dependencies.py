"""FastAPI dependency injection for shared application state."""

from __future__ import annotations

from fastapi import Request

from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.app_state import AppState
from lumina.config import Settings
from lumina.logger import RequestLogger


def get_app_state(request: Request) -> AppState:
    """Get the typed state installed by the lifespan."""
    return request.app.state.typed  # type: ignore[no-any-return]


def get_settings(request: Request) -> Settings:
    return get_app_state(request).settings


def get_parse_cache(request: Request) -> ParseCache:
    """Process-wide cache shared by every visualize request."""
    return get_app_state(request).parse_cache


def get_request_logger(request: Request) -> RequestLogger:
    return get_app_state(request).logger
