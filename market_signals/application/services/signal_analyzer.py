"""
Signal Analyzer
===============
Classifies a symbol as BUY / SELL / NEUTRAL from its 5m, 2h and 4h candles.

Strategies, first match wins:
1. MA distance direction on 2h or 4h, with a valid RSI on either  -> 85
2. MA distance direction on 2h or 4h alone                       -> 75
3. 5m volume spike (70) or elevated volume (60), following the 2h trend
"""

from typing import Dict, Iterable, Optional

from ...domain.services.indicators.signal_helpers import (
    HighPerformanceVolumeDetector,
    OptimizedMADistanceCalculator,
    is_rsi_valid,
)
from ...domain.services.streaming_indicator_engine.core.types import (
    CandleSnapshot,
    SignalAnalysis,
    SignalDirection,
    SignalType,
    TimeframeSnapshot,
    VolumeLevel,
)
from ...domain.services.streaming_indicator_engine.memory.object_pool import ObjectPool
from ...infrastructure.config.settings import SignalSettings


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value}%"


class SignalAnalyzer:
    """
    Stateless apart from the shared distance memo and volume histories.

    analyze() returns a record acquired from ``pool``; the caller releases it
    once the values have been copied out.
    """

    def __init__(self,
                 pool: ObjectPool[SignalAnalysis],
                 distance_calculator: OptimizedMADistanceCalculator,
                 volume_detector: HighPerformanceVolumeDetector,
                 settings: Optional[SignalSettings] = None):
        self.pool = pool
        self.distance_calculator = distance_calculator
        self.volume_detector = volume_detector
        self.settings = settings or SignalSettings()

    def analyze(self, symbol: str, timeframes: Iterable[TimeframeSnapshot]) -> SignalAnalysis:
        analysis = self.pool.acquire()

        current: Dict[str, Optional[CandleSnapshot]] = {}
        previous: Dict[str, Optional[CandleSnapshot]] = {}
        for tf in timeframes:
            current[tf.timeframe] = tf.current
            previous[tf.timeframe] = tf.previous

        tf2h = current.get('2h')
        tf4h = current.get('4h')
        tf5m = current.get('5m')
        tf5m_prev = previous.get('5m')

        if not tf2h or not tf4h or not tf5m:
            return self._fill(analysis, SignalType.NEUTRAL, 0, "Insufficient data")

        s = self.settings
        calc = self.distance_calculator

        if tf2h.ma1 and tf2h.center and tf2h.rsi and tf4h.ma1 and tf4h.center and tf4h.rsi:
            dist2h = calc.calculate(tf2h.ma1, tf2h.center)
            dist4h = calc.calculate(tf4h.ma1, tf4h.center)
            direction2h = calc.get_signal_direction(dist2h, s.dist_2h_threshold)
            direction4h = calc.get_signal_direction(dist4h, s.dist_4h_threshold)

            rsi_ok = (is_rsi_valid(tf2h.rsi, s.rsi_min, s.rsi_max)
                      or is_rsi_valid(tf4h.rsi, s.rsi_min, s.rsi_max))
            has_direction = (direction2h != SignalDirection.NEUTRAL
                             or direction4h != SignalDirection.NEUTRAL)

            if has_direction and rsi_ok:
                signal = self._direction_signal(direction2h, direction4h)
                if direction2h != SignalDirection.NEUTRAL:
                    active, dist = '2h', dist2h
                else:
                    active, dist = '4h', dist4h
                return self._fill(analysis, signal, 85,
                                  f"{signal.value} signal {active} ({_signed(dist)}) + valid RSI")

        if tf2h.ma1 and tf2h.center and tf4h.ma1 and tf4h.center:
            dist2h = calc.calculate(tf2h.ma1, tf2h.center)
            dist4h = calc.calculate(tf4h.ma1, tf4h.center)
            direction2h = calc.get_signal_direction(dist2h, s.dist_2h_threshold)
            direction4h = calc.get_signal_direction(dist4h, s.dist_4h_threshold)

            if direction2h != SignalDirection.NEUTRAL or direction4h != SignalDirection.NEUTRAL:
                signal = self._direction_signal(direction2h, direction4h)
                return self._fill(analysis, signal, 75,
                                  f"Distance: 2h={_signed(dist2h)}, 4h={_signed(dist4h)}")

        if tf5m.volume and tf5m_prev and tf5m_prev.volume and tf2h.ma1 and tf2h.center:
            volume = self.volume_detector.detect_spike(symbol, tf5m.volume, s.volume_spike_threshold)
            if volume.level != VolumeLevel.NORMAL:
                trend = SignalType.BUY if tf2h.ma1 > tf2h.center else SignalType.SELL
                is_spike = volume.level == VolumeLevel.SPIKE
                return self._fill(
                    analysis, trend, 70 if is_spike else 60,
                    f"{'Sudden' if is_spike else 'Elevated'} 5m volume ({volume.ratio}x) + {trend.value} trend"
                )

        return self._fill(analysis, SignalType.NEUTRAL, 0, "Neutral conditions")

    def should_execute(self, analysis: SignalAnalysis) -> bool:
        """Whether a signal is strong enough to be flagged for execution."""
        return (analysis.signal != SignalType.NEUTRAL
                and analysis.confidence >= self.settings.confidence_threshold)

    @staticmethod
    def _direction_signal(direction2h: SignalDirection, direction4h: SignalDirection) -> SignalType:
        if SignalDirection.BULLISH in (direction2h, direction4h):
            return SignalType.BUY
        return SignalType.SELL

    @staticmethod
    def _fill(analysis: SignalAnalysis, signal: SignalType, confidence: float, reason: str) -> SignalAnalysis:
        analysis.signal = signal
        analysis.confidence = confidence
        analysis.reason = reason
        return analysis
