"""
Tests for AppSettings - defaults, environment overrides and JSON loading.
"""

import json

import pytest
from pydantic import ValidationError

from market_signals.infrastructure.config import (
    AppSettings,
    CacheSettings,
    CandleApiSettings,
    ProcessorSettings,
    SignalSettings,
    load_app_settings_from_json,
)
from market_signals.infrastructure.config.config_loader import resolve_env_vars
from market_signals.infrastructure.config.settings import LogLevel


class TestDefaults:

    def test_processor_defaults(self):
        settings = ProcessorSettings()

        assert settings.max_concurrent == 8
        assert settings.batch_size == 6
        assert settings.batch_delay_seconds == pytest.approx(0.1)
        assert settings.followup_delay_seconds == pytest.approx(0.05)
        assert settings.slot_timeout_seconds == pytest.approx(5.0)
        assert settings.preload_limit == 12

    def test_signal_defaults(self):
        settings = SignalSettings()

        assert settings.rsi_min == 35
        assert settings.rsi_max == 73
        assert settings.timeframes == ['5m', '2h', '4h']
        assert settings.max_symbols == 20
        assert settings.chunk_size == 8

    def test_candle_api_strips_trailing_slash(self):
        assert CandleApiSettings(base_url="http://backend:3001/").base_url == "http://backend:3001"


class TestEnvironmentOverrides:

    def test_prefixed_env_var(self, monkeypatch):
        monkeypatch.setenv("PROCESSOR_BATCH_SIZE", "10")
        monkeypatch.setenv("CACHE_MAX_SIZE", "250")

        settings = AppSettings()

        assert settings.processor.batch_size == 10
        assert settings.cache.max_size == 250

    def test_invalid_env_value_rejected(self, monkeypatch):
        monkeypatch.setenv("PROCESSOR_MAX_CONCURRENT", "0")

        with pytest.raises(ValidationError):
            ProcessorSettings()

    def test_probability_bounds(self):
        with pytest.raises(ValidationError):
            CacheSettings(distance_memo_clear_probability=1.5)


class TestJsonLoader:

    def test_sections_applied(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "logging": {"level": "debug"},
            "processor": {"batch_size": 4, "max_concurrent": 2},
            "candle_api": {"base_url": "http://candles.local/"},
            "signals": {"timeframes": ["5m", "1h"]},
            "unknown_section": {"x": 1},
        }))

        settings = load_app_settings_from_json(str(config_file))

        assert settings.logging.level == LogLevel.DEBUG
        assert settings.processor.batch_size == 4
        assert settings.processor.max_concurrent == 2
        assert settings.processor.batch_delay_seconds == pytest.approx(0.1)
        assert settings.candle_api.base_url == "http://candles.local"
        assert settings.signals.timeframes == ["5m", "1h"]

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_app_settings_from_json(str(tmp_path / "absent.json"))

        assert settings.processor.batch_size == 6

    def test_invalid_values_give_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"processor": {"batch_size": -1}}))

        settings = load_app_settings_from_json(str(config_file))

        assert settings.processor.batch_size == 6

    def test_env_placeholders_resolved(self, monkeypatch):
        monkeypatch.setenv("CANDLE_HOST", "http://from-env:3001")

        resolved = resolve_env_vars({"candle_api": {"base_url": "${CANDLE_HOST}"}, "list": ["${UNSET_VAR_X}"]})

        assert resolved["candle_api"]["base_url"] == "http://from-env:3001"
        assert resolved["list"] == [""]
