"""Typed application state held on ``app.state.typed``."""

from __future__ import annotations

from dataclasses import dataclass

from lumina.analysis.static.parse_cache import ParseCache
from lumina.config import Settings
from lumina.logger import RequestLogger


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    parse_cache: ParseCache
    logger: RequestLogger
