"""
Tests for StructuredLogger JSON output and the per-name logger cache.
"""

import json
import uuid

from market_signals.core.logger import StructuredLogger, get_logger
from market_signals.core.exceptions import CandleHTTPError
from market_signals.infrastructure.config import LoggingSettings
from market_signals.infrastructure.config.settings import LogLevel


def _file_logger(tmp_path, level=LogLevel.DEBUG):
    name = f"test.{uuid.uuid4().hex}"
    config = LoggingSettings(level=level, console_enabled=False, file_enabled=True, log_dir=str(tmp_path))
    return StructuredLogger(name, config), tmp_path / f"{name}.jsonl"


class TestStructuredLogger:

    def test_event_written_as_json_line(self, tmp_path):
        logger, log_file = _file_logger(tmp_path)

        logger.info("timeframe_processor.batch_started", {"items": 6, "symbols": ["BTCUSDT"]})

        record = json.loads(log_file.read_text().strip())
        assert record["level"] == "INFO"
        assert record["event_type"] == "timeframe_processor.batch_started"
        assert record["data"] == {"items": 6, "symbols": ["BTCUSDT"]}

    def test_level_filtering(self, tmp_path):
        logger, log_file = _file_logger(tmp_path, level=LogLevel.WARNING)

        logger.debug("ignored", {})
        logger.warning("kept", {"symbol": "BTCUSDT"})

        lines = log_file.read_text().strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event_type"] == "kept"

    def test_exceptions_serialized(self, tmp_path):
        logger, log_file = _file_logger(tmp_path)

        logger.error("candle_rest_client.request_error", {"error": CandleHTTPError("BTCUSDT", "5m", 500)})

        record = json.loads(log_file.read_text().strip())
        assert record["data"]["error"] == "CandleHTTPError: HTTP 500 for BTCUSDT-5m"


class TestGetLogger:

    def test_cached_per_name(self):
        name = f"test.{uuid.uuid4().hex}"
        config = LoggingSettings(console_enabled=False)

        assert get_logger(name, config) is get_logger(name, config)
