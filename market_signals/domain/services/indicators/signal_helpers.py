"""
Derived Signal Helpers
======================
Transforms over indicator outputs: moving-average distance, RSI range
checks, crossover detection and per-symbol volume spikes.
"""

import math
from collections import OrderedDict
from typing import Dict

from .incremental_base import RingBuffer
from ..streaming_indicator_engine.core.types import (
    CrossoverType,
    SignalDirection,
    VolumeLevel,
    VolumeSpikeResult,
)


def calculate_ma_distance(ma1: float, ma2: float) -> float:
    """
    Percentage divergence of ``ma1`` from ``ma2``.

    Returns NaN when ``ma2`` is zero; callers guard against it.
    """
    if ma2 == 0:
        return math.nan
    return (ma1 - ma2) / ma2 * 100


def is_rsi_valid(rsi: float, min_rsi: float = 35, max_rsi: float = 73) -> bool:
    """Inclusive range check used to drop extreme RSI readings."""
    return min_rsi <= rsi <= max_rsi


def detect_ma_crossover(current_ma1: float,
                        current_ma2: float,
                        previous_ma1: float,
                        previous_ma2: float) -> CrossoverType:
    """
    Crossover of MA1 over MA2 between the previous and the current sample.

    Example:
        detect_ma_crossover(5, 3, 3, 5)  # CrossoverType.BULLISH
    """
    current_above = current_ma1 > current_ma2
    previous_above = previous_ma1 > previous_ma2

    if current_above and not previous_above:
        return CrossoverType.BULLISH
    if not current_above and previous_above:
        return CrossoverType.BEARISH
    return CrossoverType.NONE


class OptimizedMADistanceCalculator:
    """
    Memoized MA distance, rounded to two decimals.

    The memo is keyed on both operands at 6 decimals. Once it holds more
    than ``max_entries`` results, the ``trim_count`` oldest insertions are
    dropped.
    """

    DISTANCE_PRECISION = 2

    def __init__(self, max_entries: int = 500, trim_count: int = 100):
        self.max_entries = max_entries
        self.trim_count = trim_count
        self._distance_cache: Dict[str, float] = {}

    def calculate(self, ma1: float, center: float) -> float:
        """Distance in percent; 0 when either input is missing or zero."""
        if not ma1 or not center:
            return 0

        cache_key = f"{ma1:.6f}-{center:.6f}"
        cached = self._distance_cache.get(cache_key)
        if cached is not None:
            return cached

        distance = round((ma1 - center) / center * 100, self.DISTANCE_PRECISION)

        if len(self._distance_cache) > self.max_entries:
            for key in list(self._distance_cache)[:self.trim_count]:
                del self._distance_cache[key]

        self._distance_cache[cache_key] = distance
        return distance

    @staticmethod
    def get_signal_direction(distance: float, threshold: float = 2) -> SignalDirection:
        if distance >= threshold:
            return SignalDirection.BULLISH
        if distance <= -threshold:
            return SignalDirection.BEARISH
        return SignalDirection.NEUTRAL

    @property
    def cache_size(self) -> int:
        return len(self._distance_cache)

    def clear(self) -> None:
        self._distance_cache.clear()


class HighPerformanceVolumeDetector:
    """
    Per-symbol volume spike detection.

    Each symbol keeps up to ``max_history`` volumes (FIFO). The number of
    tracked symbols is capped at ``max_symbols``; the symbol updated least
    recently is forgotten first.
    """

    def __init__(self, max_history: int = 20, max_symbols: int = 500,
                 elevated_threshold: float = 1.5):
        self.max_history = max_history
        self.max_symbols = max_symbols
        self.elevated_threshold = elevated_threshold
        self._volume_history: 'OrderedDict[str, RingBuffer]' = OrderedDict()

    def detect_spike(self, symbol: str, current_volume: float,
                     spike_threshold: float = 2.0) -> VolumeSpikeResult:
        history = self._history_for(symbol)

        if len(history) == 0:
            history.append(current_volume)
            return VolumeSpikeResult(is_spike=False, ratio=1.0, level=VolumeLevel.NORMAL)

        avg_volume = history.mean()
        if avg_volume:
            ratio = current_volume / avg_volume
        else:
            ratio = math.inf if current_volume > 0 else 0.0
        history.append(current_volume)

        if ratio >= spike_threshold:
            level = VolumeLevel.SPIKE
        elif ratio >= self.elevated_threshold:
            level = VolumeLevel.ELEVATED
        else:
            level = VolumeLevel.NORMAL

        return VolumeSpikeResult(
            is_spike=ratio >= spike_threshold,
            ratio=round(ratio, 2),
            level=level,
        )

    def _history_for(self, symbol: str) -> RingBuffer:
        history = self._volume_history.get(symbol)
        if history is None:
            history = RingBuffer(self.max_history)
            self._volume_history[symbol] = history
            while len(self._volume_history) > self.max_symbols:
                self._volume_history.popitem(last=False)
        else:
            self._volume_history.move_to_end(symbol)
        return history

    @property
    def tracked_symbols(self) -> int:
        return len(self._volume_history)

    def forget(self, symbol: str) -> None:
        self._volume_history.pop(symbol, None)

    def clear(self) -> None:
        self._volume_history.clear()
