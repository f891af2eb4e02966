"""
Streaming Indicator Engine - Shared Primitives
==============================================
TTL cache, object pool and the value types passed between the engine's
components.
"""

from .caching.cache_manager import IndicatorCache
from .memory.object_pool import ObjectPool, create_signal_analysis_pool
from .core.types import (
    MISSING,
    CacheEntry,
    CandleSnapshot,
    CrossoverType,
    SignalAnalysis,
    SignalDirection,
    SignalType,
    TimeframeSnapshot,
    TradingSignal,
    VolumeLevel,
    VolumeSpikeResult,
)

__all__ = [
    "IndicatorCache",
    "ObjectPool",
    "create_signal_analysis_pool",
    "MISSING",
    "CacheEntry",
    "CandleSnapshot",
    "CrossoverType",
    "SignalAnalysis",
    "SignalDirection",
    "SignalType",
    "TimeframeSnapshot",
    "TradingSignal",
    "VolumeLevel",
    "VolumeSpikeResult",
]
