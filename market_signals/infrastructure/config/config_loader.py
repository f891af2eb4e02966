"""
Configuration Loader - Bridge Between JSON Config and AppSettings
================================================================
Loads configuration from a JSON file and maps it onto AppSettings.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .settings import AppSettings, LogLevel

# JSON section name -> AppSettings attribute
_SECTIONS = {
    "cache": "cache",
    "processor": "processor",
    "candle_api": "candle_api",
    "signals": "signals",
}


def resolve_env_vars(data: Any) -> Any:
    """Replace "${VAR}" string values with the environment value (or "")."""
    if isinstance(data, dict):
        return {k: resolve_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [resolve_env_vars(i) for i in data]
    elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
        return os.getenv(data[2:-1], "")
    return data


def _apply_section(settings: AppSettings, attr: str, values: Dict[str, Any]) -> None:
    current = getattr(settings, attr)
    merged = {**current.model_dump(), **values}
    setattr(settings, attr, type(current).model_validate(merged))


def load_app_settings_from_json(config_path: str = "config/config.json") -> AppSettings:
    """
    Load AppSettings from JSON configuration file.

    Unknown sections are ignored. A missing or invalid file yields default
    settings (environment overrides still apply).

    Args:
        config_path: Path to config.json file

    Returns:
        Configured AppSettings instance
    """
    settings = AppSettings()
    try:
        with open(config_path, 'r') as f:
            resolved_data = resolve_env_vars(json.load(f))
    except (OSError, json.JSONDecodeError) as e:
        print(f"[WARNING] Failed to load JSON config from {config_path}: {e}")
        print("[INFO] Using default AppSettings configuration")
        return settings

    try:
        if 'logging' in resolved_data:
            logging_config = resolved_data['logging']
            json_level = str(logging_config.get('level', 'INFO')).upper()
            if json_level in LogLevel.__members__:
                settings.logging.level = LogLevel[json_level]
            if 'file' in logging_config:
                settings.logging.file_enabled = True
                settings.logging.log_dir = str(Path(logging_config['file']).parent)

        for section, attr in _SECTIONS.items():
            if isinstance(resolved_data.get(section), dict):
                _apply_section(settings, attr, resolved_data[section])
    except ValidationError as e:
        print(f"[WARNING] Invalid values in {config_path}: {e}")
        print("[INFO] Using default AppSettings configuration")
        return AppSettings()

    return settings


def get_settings_from_working_directory() -> AppSettings:
    """
    Load settings from config.json relative to the current working directory.

    Returns:
        Configured AppSettings instance
    """
    possible_paths = [
        "config/config.json",
        "../config/config.json",
    ]

    for config_path in possible_paths:
        if Path(config_path).exists():
            return load_app_settings_from_json(config_path)

    return AppSettings()
