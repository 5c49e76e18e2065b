"""Structured JSON logger for visualize requests and failures."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from lumina.constants import DIGEST_LOG_CHARS, ERROR_TRUNCATION_CHARS
from lumina.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["RequestLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class RequestLogger:
    """Structured JSON logger with request_id correlation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("lumina.requests")
        self._logger.setLevel(getattr(logging, level.upper()))

        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "requests.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def log_request(
        self,
        request_id: str,
        digest: str,
        language: str,
        cached: bool,
        duration_ms: float,
        node_count: int,
        edge_count: int,
        error_count: int,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "visualize",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "digest": digest[:DIGEST_LOG_CHARS],
                "language": language,
                "cached": cached,
                "duration_ms": duration_ms,
                "nodes": node_count,
                "edges": edge_count,
                "errors": error_count,
            })
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
