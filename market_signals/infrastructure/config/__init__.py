"""
Infrastructure Configuration - Unified Configuration System
==========================================================
Single source of truth for all engine configuration.

Settings are created once by the owner of the engine and passed down;
no module reads configuration through a global.
"""

from .settings import (
    AppSettings,
    LoggingSettings,
    CacheSettings,
    ProcessorSettings,
    CandleApiSettings,
    SignalSettings,
)
from .config_loader import load_app_settings_from_json, get_settings_from_working_directory

__all__ = [
    'AppSettings',
    'LoggingSettings',
    'CacheSettings',
    'ProcessorSettings',
    'CandleApiSettings',
    'SignalSettings',
    'load_app_settings_from_json',
    'get_settings_from_working_directory',
]
