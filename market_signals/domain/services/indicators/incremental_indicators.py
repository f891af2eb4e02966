"""
Concrete Streaming Indicator Implementations
============================================
O(1) indicator updates without full recalculations.

Implemented:
- FastRSI (Wilder's smoothing, simple-average seed)
- FastSMA (zero-seeded circular buffer with running sum)
- VolumeSpikeDetector (volume vs. mean of recent history)
"""

from typing import List, Optional

from .incremental_base import RingBuffer, StreamingIndicator


# ============================================================================
# RSI - Relative Strength Index
# ============================================================================

class FastRSI(StreamingIndicator):
    """
    Incremental RSI.

    States: uninitialized -> warming (returns None) -> ready.

    1. First price only records last_price.
    2. Each later price adds gain/loss to a history bounded at ``period``.
    3. When the history first holds ``period`` samples, the averages are
       seeded with simple means.
    4. Afterwards, Wilder's smoothing:
       avg = (avg * (period - 1) + sample) / period
    5. RSI = 100 - 100 / (1 + avg_gain / avg_loss); 100 when avg_loss == 0.

    Complexity: O(1) per update after the seed
    """

    def __init__(self, period: int = 14):
        super().__init__(period)
        self.gains = RingBuffer(period)
        self.losses = RingBuffer(period)
        self.avg_gain = 0.0
        self.avg_loss = 0.0
        self.last_price = 0.0
        self.is_initialized = False
        self._seeded = False

    def update(self, price: float) -> Optional[float]:
        """
        Feed the next price.

        Returns:
            RSI in [0, 100], or None while warming up
        """
        if not self.is_initialized:
            self.last_price = price
            self.is_initialized = True
            return None

        change = price - self.last_price
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        self.last_price = price

        self.gains.append(gain)
        self.losses.append(loss)

        if not self.gains.is_full():
            return None

        if not self._seeded:
            self.avg_gain = self.gains.total() / self.period
            self.avg_loss = self.losses.total() / self.period
            self._seeded = True
        else:
            self.avg_gain = (self.avg_gain * (self.period - 1) + gain) / self.period
            self.avg_loss = (self.avg_loss * (self.period - 1) + loss) / self.period

        if self.avg_loss == 0:
            self._value = 100.0
        else:
            rs = self.avg_gain / self.avg_loss
            self._value = 100 - (100 / (1 + rs))
        return self._value

    def reset(self):
        self.gains.clear()
        self.losses.clear()
        self.avg_gain = 0.0
        self.avg_loss = 0.0
        self.last_price = 0.0
        self.is_initialized = False
        self._seeded = False
        self._value = None


# ============================================================================
# SMA - Simple Moving Average
# ============================================================================

class FastSMA(StreamingIndicator):
    """
    SMA over a circular buffer pre-filled with zeros.

    The running sum subtracts the overwritten slot and adds the new value.
    Output stays None until ``period`` real values were pushed, so the zero
    padding never shows up in a result.

    Complexity: O(1) per update
    Memory: O(period)
    """

    def __init__(self, period: int):
        super().__init__(period)
        self.values: List[float] = [0.0] * period
        self.sum = 0.0
        self.index = 0
        self.count = 0

    def update(self, value: float) -> Optional[float]:
        old_value = self.values[self.index]
        self.values[self.index] = value

        self.sum = self.sum - old_value + value
        self.index = (self.index + 1) % self.period
        self.count = min(self.count + 1, self.period)

        self._value = None if self.count < self.period else self.sum / self.period
        return self._value

    def reset(self):
        self.values = [0.0] * self.period
        self.sum = 0.0
        self.index = 0
        self.count = 0
        self._value = None


# ============================================================================
# VOLUME SPIKE DETECTOR
# ============================================================================

class VolumeSpikeDetector:
    """
    Flags a volume that is at least ``threshold`` times the mean of the
    recent history (up to ``max_history`` samples, FIFO).

    The first call only seeds the history.
    """

    def __init__(self, max_history: int = 20):
        self.max_history = max_history
        self.recent_volumes = RingBuffer(max_history)

    def detect_spike(self, current_volume: float, threshold: float = 2.0) -> bool:
        if len(self.recent_volumes) == 0:
            self.recent_volumes.append(current_volume)
            return False

        avg_volume = self.recent_volumes.mean()
        is_spike = current_volume >= avg_volume * threshold

        self.recent_volumes.append(current_volume)
        return is_spike

    def reset(self):
        self.recent_volumes.clear()

    def __len__(self):
        return len(self.recent_volumes)


__all__ = [
    'FastRSI',
    'FastSMA',
    'VolumeSpikeDetector',
]
