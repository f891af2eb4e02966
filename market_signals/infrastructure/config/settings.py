"""
Unified Configuration Settings - Single Source of Truth
=======================
All engine configuration using Pydantic Settings.

Time values are in seconds.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List
from enum import Enum


class LogLevel(str, Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# === LOGGING CONFIGURATION ===

class LoggingSettings(BaseSettings):
    """Logging configuration"""
    level: LogLevel = Field(default=LogLevel.INFO)
    file_enabled: bool = Field(default=False)
    console_enabled: bool = Field(default=True)
    structured_logging: bool = Field(default=True)
    log_dir: str = Field(default="logs")
    max_file_size_mb: int = Field(default=100)
    backup_count: int = Field(default=5)

    class Config:
        env_prefix = "LOG_"


# === CACHE CONFIGURATION ===

class CacheSettings(BaseSettings):
    """Indicator cache and object pool configuration"""
    default_ttl_seconds: float = Field(default=30.0, description="TTL used when set() gets no ttl")
    max_size: int = Field(default=1000, description="Soft bound enforced by cleanup()")
    pool_initial_size: int = Field(default=10, description="Pre-allocated pooled records")
    formatter_max_entries: int = Field(default=1000, description="Formatter memo size before clearing")
    distance_memo_clear_probability: float = Field(
        default=0.1, description="Chance a maintenance tick clears the MA distance memo"
    )

    @field_validator('max_size', 'pool_initial_size', 'formatter_max_entries')
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator('distance_memo_clear_probability')
    @classmethod
    def validate_probability(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError("probability must be within [0, 1]")
        return v

    class Config:
        env_prefix = "CACHE_"


# === PROCESSOR CONFIGURATION ===

class ProcessorSettings(BaseSettings):
    """Parallel timeframe processor configuration"""
    max_concurrent: int = Field(default=8, description="Items fetching at the same time")
    batch_size: int = Field(default=6, description="Items flushed per batch")
    batch_delay_seconds: float = Field(default=0.1, description="Debounce before a partial batch flushes")
    followup_delay_seconds: float = Field(default=0.05, description="Pause between consecutive batches")
    slot_timeout_seconds: float = Field(default=5.0, description="Max wait for a concurrency slot")
    cache_ttl_seconds: float = Field(default=30.0, description="TTL of cached candle responses")
    cache_bucket_seconds: float = Field(default=30.0, description="Time bucket of candle cache keys")
    preload_limit: int = Field(default=12, description="Symbols warmed by preload_symbols()")

    @field_validator('max_concurrent', 'batch_size')
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    class Config:
        env_prefix = "PROCESSOR_"


# === CANDLE API CONFIGURATION ===

class CandleApiSettings(BaseSettings):
    """Market data backend configuration"""
    base_url: str = Field(default="http://localhost:3001", description="Backend serving /api/trading/candles")
    candle_limit: int = Field(default=50, description="Candles requested per timeframe")
    request_timeout_seconds: float = Field(default=8.0, description="Abort timeout per request")
    cache_control: str = Field(default="max-age=30")

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    class Config:
        env_prefix = "CANDLE_API_"


# === SIGNAL CONFIGURATION ===

class SignalSettings(BaseSettings):
    """Signal analysis and scanning configuration"""
    rsi_min: float = Field(default=35.0)
    rsi_max: float = Field(default=73.0)
    dist_2h_threshold: float = Field(default=2.0, description="MA distance % for a 2h direction")
    dist_4h_threshold: float = Field(default=3.0, description="MA distance % for a 4h direction")
    volume_spike_threshold: float = Field(default=2.0)
    volume_elevated_threshold: float = Field(default=1.5)
    confidence_threshold: float = Field(default=70.0, description="Minimum confidence to flag execution")
    timeframes: List[str] = Field(default_factory=lambda: ['5m', '2h', '4h'])
    max_symbols: int = Field(default=20)
    chunk_size: int = Field(default=8)
    signal_ttl_seconds: float = Field(default=30.0)
    max_tracked_symbols: int = Field(default=500, description="Volume histories kept before evicting")

    class Config:
        env_prefix = "SIGNAL_"


# === MAIN APPLICATION SETTINGS ===

class AppSettings(BaseSettings):
    """Main application settings - Single Source of Truth"""

    app_name: str = Field(default="Market Signals Engine")
    version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    processor: ProcessorSettings = Field(default_factory=ProcessorSettings)
    candle_api: CandleApiSettings = Field(default_factory=CandleApiSettings)
    signals: SignalSettings = Field(default_factory=SignalSettings)

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"  # Allows PROCESSOR__BATCH_SIZE=10
        case_sensitive = False
        extra = "ignore"
