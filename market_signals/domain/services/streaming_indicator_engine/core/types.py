"""
Shared Types for Streaming Indicator Engine
============================================
Data types and enums shared by the cache, indicators and signal services.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum


class _Missing:
    """Sentinel type for cache lookups that found nothing."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


class SignalType(str, Enum):
    """Trading signal classification"""
    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


class SignalDirection(str, Enum):
    """Direction implied by a moving-average distance"""
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class CrossoverType(str, Enum):
    """Moving-average crossover between two consecutive samples"""
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NONE = "NONE"


class VolumeLevel(str, Enum):
    """Volume relative to recent history"""
    NORMAL = "NORMAL"
    ELEVATED = "ELEVATED"
    SPIKE = "SPIKE"


@dataclass
class CacheEntry:
    """Single cache entry; logically absent once older than its ttl"""
    value: Any
    timestamp: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


@dataclass
class SignalAnalysis:
    """Mutable, poolable result of a signal analysis"""
    signal: SignalType = SignalType.NEUTRAL
    confidence: float = 0
    reason: str = ""


@dataclass(frozen=True)
class VolumeSpikeResult:
    """Outcome of a per-symbol volume spike check"""
    is_spike: bool
    ratio: float
    level: VolumeLevel


@dataclass
class CandleSnapshot:
    """One candle row as served by the candle endpoint"""
    timestamp: float
    open: float
    high: float
    low: float
    close: float
    volume: float
    ma1: Optional[float] = None
    center: Optional[float] = None
    rsi: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['CandleSnapshot']:
        """Build from a response row; None for a missing row."""
        if not data:
            return None

        def _opt(name):
            value = data.get(name)
            return float(value) if value is not None else None

        return cls(
            timestamp=float(data.get("timestamp", 0) or 0),
            open=float(data.get("open", 0) or 0),
            high=float(data.get("high", 0) or 0),
            low=float(data.get("low", 0) or 0),
            close=float(data.get("close", 0) or 0),
            volume=float(data.get("volume", 0) or 0),
            ma1=_opt("ma1"),
            center=_opt("center"),
            rsi=_opt("rsi"),
        )


@dataclass
class TimeframeSnapshot:
    """Latest and previous candle of one timeframe"""
    timeframe: str
    current: Optional[CandleSnapshot]
    previous: Optional[CandleSnapshot] = None


@dataclass
class TradingSignal:
    """Signal produced for one symbol by a scan"""
    symbol: str
    signal: SignalType
    confidence: float
    reason: str
    timestamp: float
    timeframes: List[TimeframeSnapshot] = field(default_factory=list)
    should_execute: bool = False
