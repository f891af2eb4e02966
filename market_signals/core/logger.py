import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from datetime import datetime, timezone
from typing import Dict, Any, Optional, TYPE_CHECKING
from pathlib import Path
from decimal import Decimal

if TYPE_CHECKING:
    from ..infrastructure.config.settings import LoggingSettings

# Cache of StructuredLogger instances keyed by logger name
_logger_cache: Dict[str, 'StructuredLogger'] = {}
_cache_lock = threading.RLock()


# --- Custom JSON Formatter ---

class CustomJsonEncoder(json.JSONEncoder):
    """JSON encoder for Decimal, Enum, datetime and float('nan') friendly output."""
    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        if hasattr(obj, 'name') and hasattr(obj, 'value'):  # Enum-like
            return obj.name
        if isinstance(obj, BaseException):
            return f"{type(obj).__name__}: {obj}"
        if isinstance(obj, type):
            return obj.__name__
        return super().default(obj)


class JsonFormatter(logging.Formatter):
    """Formats log records into a JSON string."""

    def _sanitize_dict(self, d: dict) -> dict:
        """Recursively stringify keys of nested dictionaries."""
        sanitized = {}
        for k, v in d.items():
            str_key = str(k)
            if isinstance(v, dict):
                sanitized[str_key] = self._sanitize_dict(v)
            elif isinstance(v, (list, tuple)):
                sanitized[str_key] = [self._sanitize_dict(item) if isinstance(item, dict) else item for item in v]
            else:
                sanitized[str_key] = v
        return sanitized

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            message_dict = self._sanitize_dict(record.msg)
        else:
            message_dict = {"message": record.getMessage()}

        log_object = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
            **message_dict,
        }
        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, cls=CustomJsonEncoder)


class StructuredLogger:
    """
    Event-oriented logger: every call is an event type plus a data dict.

    Example:
        logger.info("timeframe_processor.batch_flushed", {"items": 6})
    """

    def __init__(self, name: str, config: Any, filename: Optional[str] = None):
        self.logger = logging.getLogger(name)
        level = getattr(config.level, 'value', config.level)
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
        self.logger.propagate = False

        console_enabled = getattr(config, 'console_enabled', True)
        file_enabled = getattr(config, 'file_enabled', False)
        structured_logging = getattr(config, 'structured_logging', True)
        max_file_size_mb = getattr(config, 'max_file_size_mb', 100)
        backup_count = getattr(config, 'backup_count', 5)
        log_dir = getattr(config, 'log_dir', 'logs')

        if filename:
            log_file = str(Path(log_dir) / filename)
        elif file_enabled:
            log_file = str(Path(log_dir) / f"{name}.jsonl")
        else:
            log_file = None

        formatter = JsonFormatter() if structured_logging else logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        self._setup_console_handler(console_enabled, formatter)
        self._setup_file_handler(log_file, max_file_size_mb, backup_count, formatter)

    def _setup_console_handler(self, enabled: bool, formatter: logging.Formatter):
        """Attach a stdout handler unless one is already attached."""
        if not enabled:
            return

        for existing_handler in self.logger.handlers:
            if isinstance(existing_handler, logging.StreamHandler) and \
                    getattr(existing_handler, 'stream', None) is sys.stdout:
                return

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

    def _setup_file_handler(self, log_file: Optional[str], max_size_mb: int, backup_count: int,
                            formatter: logging.Formatter):
        """Attach a rotating file handler unless one for the same file exists."""
        if not log_file:
            return

        log_file_normalized = os.path.abspath(log_file)
        for existing_handler in self.logger.handlers:
            if isinstance(existing_handler, RotatingFileHandler) and \
                    os.path.abspath(existing_handler.baseFilename) == log_file_normalized:
                return

        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        try:
            handler = RotatingFileHandler(
                log_file,
                maxBytes=max_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            print(f"ERROR: Failed to create file handler for {log_file}: {e}", file=sys.stderr)
            return

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

    def _log(self, level: int, event_type: str, data: Dict[str, Any], exc_info=False):
        payload = {"event_type": event_type, "data": data}
        self.logger.log(level, payload, exc_info=exc_info)

    def info(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.INFO, event_type, data or {})

    def warning(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.WARNING, event_type, data or {})

    def error(self, event_type: str, data: Dict[str, Any] = None, exc_info=False):
        """
        Log an error event.

        Args:
            event_type: Type of error event
            data: Optional error context data
            exc_info: Include exception info (default: False)
        """
        self._log(logging.ERROR, event_type, data or {}, exc_info=exc_info)

    def debug(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.DEBUG, event_type, data or {})


def get_logger(name: str, config: Optional['LoggingSettings'] = None) -> StructuredLogger:
    """
    Get a cached structured logger instance for the given name.

    The first call for a name builds the logger from ``config`` (or from
    ``LoggingSettings`` read from the environment); later calls return the
    cached instance so handlers are never attached twice.

    Args:
        name: Logger name (typically __name__ of calling module)
        config: Optional logging settings used on first creation

    Returns:
        Cached StructuredLogger instance (singleton per name)
    """
    if name in _logger_cache:
        return _logger_cache[name]

    with _cache_lock:
        if name in _logger_cache:
            return _logger_cache[name]

        if config is None:
            from ..infrastructure.config.settings import LoggingSettings
            config = LoggingSettings()

        logger = StructuredLogger(name, config)
        _logger_cache[name] = logger
        return logger
