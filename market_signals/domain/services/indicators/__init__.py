"""
Incremental Indicator System
============================
O(1) indicator updates fed one sample at a time.

Module structure:
- incremental_base: RingBuffer and the StreamingIndicator base class
- incremental_indicators: FastRSI, FastSMA, VolumeSpikeDetector
- signal_helpers: MA distance, RSI range, crossovers, per-symbol volume spikes

Usage:
    from market_signals.domain.services.indicators import FastRSI

    rsi = FastRSI(period=14)
    value = rsi.update(price=50000.0)  # None until warmed up
"""

from .incremental_base import RingBuffer, StreamingIndicator
from .incremental_indicators import FastRSI, FastSMA, VolumeSpikeDetector
from .signal_helpers import (
    HighPerformanceVolumeDetector,
    OptimizedMADistanceCalculator,
    calculate_ma_distance,
    detect_ma_crossover,
    is_rsi_valid,
)

__all__ = [
    'RingBuffer',
    'StreamingIndicator',
    'FastRSI',
    'FastSMA',
    'VolumeSpikeDetector',
    'HighPerformanceVolumeDetector',
    'OptimizedMADistanceCalculator',
    'calculate_ma_distance',
    'detect_ma_crossover',
    'is_rsi_valid',
]
