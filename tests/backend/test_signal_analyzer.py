"""
Tests for SignalAnalyzer - strategy ordering, confidences and reasons.
"""

import pytest

from market_signals.application.services.signal_analyzer import SignalAnalyzer
from market_signals.domain.services.indicators.signal_helpers import (
    HighPerformanceVolumeDetector,
    OptimizedMADistanceCalculator,
)
from market_signals.domain.services.streaming_indicator_engine.core.types import (
    CandleSnapshot,
    SignalType,
    TimeframeSnapshot,
)
from market_signals.domain.services.streaming_indicator_engine.memory.object_pool import create_signal_analysis_pool
from tests.fixtures.market_data import make_candle


def snapshots(tf2h=(100.0, 100.0, 50.0), tf4h=(100.0, 100.0, 50.0), volume=100.0, prev_volume=100.0):
    """Build 5m/2h/4h snapshots from (ma1, center, rsi) tuples."""
    def candle(values):
        if values is None:
            return None
        ma1, center, rsi = values
        return CandleSnapshot.from_dict(make_candle(ma1=ma1, center=center, rsi=rsi))

    return [
        TimeframeSnapshot('5m',
                          CandleSnapshot.from_dict(make_candle(volume=volume)),
                          CandleSnapshot.from_dict(make_candle(volume=prev_volume))),
        TimeframeSnapshot('2h', candle(tf2h)),
        TimeframeSnapshot('4h', candle(tf4h)),
    ]


@pytest.fixture
def analyzer():
    return SignalAnalyzer(
        create_signal_analysis_pool(initial_size=2),
        OptimizedMADistanceCalculator(),
        HighPerformanceVolumeDetector(),
    )


class TestDistanceWithRsi:

    def test_bullish_2h_with_valid_rsi(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(105.0, 100.0, 55.0)))

        assert result.signal == SignalType.BUY
        assert result.confidence == 85
        assert result.reason == "BUY signal 2h (+5.0%) + valid RSI"

    def test_bearish_4h_with_valid_rsi(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(101.0, 100.0, 55.0), tf4h=(96.0, 100.0, 40.0)))

        assert result.signal == SignalType.SELL
        assert result.confidence == 85
        assert result.reason == "SELL signal 4h (-4.0%) + valid RSI"

    def test_conflicting_directions_prefer_buy(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(95.0, 100.0, 55.0), tf4h=(104.0, 100.0, 55.0)))

        assert result.signal == SignalType.BUY
        assert result.reason.startswith("BUY signal 2h (-5.0%)")


class TestDistanceOnly:

    def test_extreme_rsi_falls_back_to_distance(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(105.0, 100.0, 80.0), tf4h=(101.0, 100.0, 20.0)))

        assert result.signal == SignalType.BUY
        assert result.confidence == 75
        assert result.reason == "Distance: 2h=+5.0%, 4h=+1.0%"

    def test_missing_rsi_falls_back_to_distance(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(100.0, 100.0, None), tf4h=(90.0, 100.0, None)))

        assert result.signal == SignalType.SELL
        assert result.confidence == 75
        assert result.reason == "Distance: 2h=0.0%, 4h=-10.0%"


class TestVolume:

    def test_volume_spike_follows_2h_trend(self, analyzer):
        analyzer.volume_detector.detect_spike("BTCUSDT", 100.0)

        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(101.0, 100.0, 50.0), volume=250.0))

        assert result.signal == SignalType.BUY
        assert result.confidence == 70
        assert result.reason == "Sudden 5m volume (2.5x) + BUY trend"

    def test_elevated_volume(self, analyzer):
        analyzer.volume_detector.detect_spike("BTCUSDT", 100.0)

        result = analyzer.analyze("BTCUSDT", snapshots(tf2h=(99.0, 100.0, 50.0), volume=160.0))

        assert result.signal == SignalType.SELL
        assert result.confidence == 60
        assert result.reason == "Elevated 5m volume (1.6x) + SELL trend"

    def test_first_volume_sample_is_neutral(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(volume=10_000.0))

        assert result.signal == SignalType.NEUTRAL
        assert result.reason == "Neutral conditions"

    def test_missing_previous_5m_skips_volume(self, analyzer):
        analyzer.volume_detector.detect_spike("BTCUSDT", 100.0)

        result = analyzer.analyze("BTCUSDT", snapshots(volume=1000.0, prev_volume=0.0))

        assert result.signal == SignalType.NEUTRAL


class TestNeutral:

    def test_insufficient_data(self, analyzer):
        result = analyzer.analyze("BTCUSDT", snapshots(tf4h=None))

        assert result.signal == SignalType.NEUTRAL
        assert result.confidence == 0
        assert result.reason == "Insufficient data"

    def test_should_execute_threshold(self, analyzer):
        strong = analyzer.analyze("BTCUSDT", snapshots(tf2h=(105.0, 100.0, 55.0)))
        assert analyzer.should_execute(strong)

        analyzer.pool.release(strong)
        analyzer.volume_detector.detect_spike("ETHUSDT", 100.0)
        weak = analyzer.analyze("ETHUSDT", snapshots(tf2h=(101.0, 100.0, 50.0), volume=160.0))
        assert weak.confidence == 60
        assert not analyzer.should_execute(weak)

    def test_analysis_records_come_from_pool(self, analyzer):
        before = analyzer.pool.size
        result = analyzer.analyze("BTCUSDT", snapshots())

        assert analyzer.pool.size == before - 1
        analyzer.pool.release(result)
        assert analyzer.pool.size == before
