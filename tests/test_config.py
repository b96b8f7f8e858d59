"""Tests for configuration loading and validation."""

import logging

import pytest
from pydantic import ValidationError

from fibengine.config import EngineConfig, LoggingConfig, Settings, load_config, setup_logging
from fibengine.strategies.base import Strategy


class TestSettings:
    def test_default_settings(self):
        settings = Settings()
        assert settings.engine.max_index == 150
        assert settings.engine.default_strategy == Strategy.FAST_DOUBLING_OPTIMIZED
        assert settings.engine.doubling_bit_width == 32
        assert settings.engine.linear_history_limit == 10_000
        assert settings.benchmark.runs_per_index == 5
        assert settings.trace.enabled is True

    def test_custom_settings(self):
        settings = Settings(engine=EngineConfig(max_index=92, default_strategy=Strategy.LINEAR_SCAN))
        assert settings.engine.max_index == 92
        assert settings.engine.default_strategy == Strategy.LINEAR_SCAN

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("linear", Strategy.LINEAR_SCAN),
            ("FAST_DOUBLING", Strategy.FAST_DOUBLING),
            (2, Strategy.FAST_DOUBLING_OPTIMIZED),
        ],
    )
    def test_strategy_spellings(self, value, expected):
        assert EngineConfig(default_strategy=value).default_strategy == expected

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            EngineConfig(max_index=-1)
        with pytest.raises(ValidationError):
            EngineConfig(linear_history_limit=1)
        with pytest.raises(ValidationError):
            EngineConfig(default_strategy=9)


class TestLoadConfig:
    def test_load_default_config(self):
        settings = load_config()
        assert isinstance(settings, Settings)
        assert settings.engine.max_index == 150

    def test_load_missing_config(self, tmp_path):
        settings = load_config(tmp_path / "nonexistent.yaml")
        assert isinstance(settings, Settings)

    def test_load_custom_config(self, tmp_path):
        config_file = tmp_path / "test.yaml"
        config_file.write_text(
            "engine:\n  max_index: 300\n  default_strategy: linear\n"
            "benchmark:\n  runs_per_index: 2\n"
        )
        settings = load_config(config_file)
        assert settings.engine.max_index == 300
        assert settings.engine.default_strategy == Strategy.LINEAR_SCAN
        assert settings.benchmark.runs_per_index == 2

    def test_empty_config_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        settings = load_config(config_file)
        assert settings.engine.max_index == 150

    def test_env_var_override(self, monkeypatch, tmp_path):
        config_file = tmp_path / "test.yaml"
        config_file.write_text("engine:\n  max_index: 100\n")
        monkeypatch.setenv("FIBENGINE_MAX_INDEX", "92")
        monkeypatch.setenv("FIBENGINE_STRATEGY", "0")
        settings = load_config(config_file)
        assert settings.engine.max_index == 92
        assert settings.engine.default_strategy == Strategy.LINEAR_SCAN


class TestSetupLogging:
    def test_creates_log_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
        log_file = tmp_path / "logs" / "fib.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        assert log_file.parent.exists()
