"""
Market data test fixtures.

Provides sample data for testing:
- Candle rows as served by the candle endpoint
- Successful and failed candle responses per timeframe
- A controllable clock for TTL and time-bucket tests
"""

import pytest


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, start: float = 1_700_000_010.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_candle(close=50000.0, volume=125.5, ma1=None, center=None, rsi=None, timestamp=1_700_000_000):
    """Candle row shaped like the candle endpoint's ``data`` items"""
    return {
        'timestamp': timestamp,
        'open': close * 0.999,
        'high': close * 1.002,
        'low': close * 0.997,
        'close': close,
        'volume': volume,
        'ma1': ma1,
        'center': center,
        'rsi': rsi,
    }


def make_response(*rows, success=True):
    """Candle endpoint body: newest row first"""
    return {'success': success, 'data': list(rows)}


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def bullish_responses():
    """5m / 2h / 4h responses with a 2h MA distance of +5% and a valid RSI"""
    return {
        '5m': make_response(make_candle(volume=100.0), make_candle(volume=90.0)),
        '2h': make_response(make_candle(ma1=105.0, center=100.0, rsi=55.0)),
        '4h': make_response(make_candle(ma1=101.0, center=100.0, rsi=50.0)),
    }


@pytest.fixture
def flat_responses():
    """5m / 2h / 4h responses with no MA divergence"""
    return {
        '5m': make_response(make_candle(volume=100.0), make_candle(volume=100.0)),
        '2h': make_response(make_candle(ma1=100.0, center=100.0, rsi=50.0)),
        '4h': make_response(make_candle(ma1=100.0, center=100.0, rsi=50.0)),
    }
