"""Tests for sparrow.config: frozen AppConfig."""

import dataclasses

import pytest

from sparrow.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.debug is False
        assert config.workers == 1
        assert config.log_level == "info"
        assert config.reload is False
        assert config.max_body_size == 100 * 1024

    def test_override(self) -> None:
        config = AppConfig(port=8080, debug=True)
        assert config.port == 8080
        assert config.debug is True

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 1  # type: ignore[misc]

    def test_replace(self) -> None:
        config = dataclasses.replace(AppConfig(), host="0.0.0.0")
        assert config.host == "0.0.0.0"
        assert config.port == 3000
