"""Tests for Settings validators."""

from __future__ import annotations

from pathlib import Path

import pytest

from lumina.config import Settings


class TestDefaults:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PORT", "HOST", "API_KEY", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.parse_cache_capacity == 50
        assert s.diagram_max_entities == 50
        assert s.max_source_bytes == 10 * 1024 * 1024
        assert s.port == 3001
        assert s.api_key == ""
        assert s.log_dir == Path("logs")

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PARSE_CACHE_CAPACITY", "7")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.parse_cache_capacity == 7
        assert s.log_level == "DEBUG"


class TestValidation:
    def test_zero_capacity_raises(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            Settings(parse_cache_capacity=0)

    def test_zero_entity_cap_raises(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            Settings(diagram_max_entities=0)

    def test_zero_source_limit_raises(self) -> None:
        with pytest.raises(ValueError, match="max_source_bytes"):
            Settings(max_source_bytes=0)

    def test_unknown_log_level_raises(self) -> None:
        with pytest.raises(ValueError, match="unknown log level"):
            Settings(log_level="chatty")


class TestCorsOrigins:
    def test_comma_separated(self) -> None:
        s = Settings(cors_origins="http://a.test, http://b.test,")
        assert s.cors_origin_list == ["http://a.test", "http://b.test"]

    def test_empty(self) -> None:
        assert Settings(cors_origins="").cors_origin_list == []
