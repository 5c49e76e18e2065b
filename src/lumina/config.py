"""Environment-based configuration and application constants."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from lumina.constants import (
    DIAGRAM_MAX_ENTITIES,
    MAX_SOURCE_BYTES,
    PARSE_CACHE_CAPACITY,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False
    log_dir: Path = Path("logs")

    # Analysis
    parse_cache_capacity: int = PARSE_CACHE_CAPACITY
    diagram_max_entities: int = DIAGRAM_MAX_ENTITIES
    max_source_bytes: int = MAX_SOURCE_BYTES

    # API
    api_key: str = ""
    cors_origins: str = "http://localhost:5173"
    host: str = "127.0.0.1"
    port: int = 3001

    @field_validator("parse_cache_capacity", "diagram_max_entities")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("max_source_bytes")
    @classmethod
    def _validate_source_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_source_bytes must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS origins parsed from the comma-separated setting."""
        return [
            o.strip() for o in self.cors_origins.split(",") if o.strip()
        ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


# Grammar used for every parse: (import path, language factory).
# The TSX grammar accepts JavaScript, TypeScript and JSX.
PARSER_GRAMMAR: tuple[str, str] = (
    "tree_sitter_typescript",
    "language_tsx",
)
