"""
Incremental Indicator Infrastructure
====================================
Base classes and utilities for O(1) streaming indicator updates.

- Ring buffers for bounded FIFO histories
- A common interface for indicators fed one sample at a time
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Optional, List


# ============================================================================
# RING BUFFER - Fixed-size FIFO buffer
# ============================================================================

class RingBuffer:
    """
    Fixed-size FIFO buffer with O(1) append; the oldest value is dropped
    once the buffer is full.

    Use case: bounded gain/loss and volume histories.
    """

    def __init__(self, maxlen: int):
        """
        Args:
            maxlen: Maximum number of elements
        """
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")

        self.maxlen = maxlen
        self.buffer = deque(maxlen=maxlen)

    def append(self, value: float):
        """Append value (auto-ejects oldest if full)."""
        self.buffer.append(value)

    def get_all(self) -> List[float]:
        """All values, oldest to newest."""
        return list(self.buffer)

    def total(self) -> float:
        return sum(self.buffer)

    def mean(self) -> Optional[float]:
        if not self.buffer:
            return None
        return sum(self.buffer) / len(self.buffer)

    def is_full(self) -> bool:
        return len(self.buffer) == self.maxlen

    def clear(self):
        self.buffer.clear()

    def __len__(self):
        return len(self.buffer)

    def __repr__(self):
        return f"RingBuffer(maxlen={self.maxlen}, size={len(self.buffer)})"


# ============================================================================
# BASE CLASS - StreamingIndicator
# ============================================================================

class StreamingIndicator(ABC):
    """
    Indicator fed one sample at a time, in chronological order.

    update() returns None while the indicator is warming up, and a value
    once enough samples have been seen. No I/O happens here.
    """

    def __init__(self, period: int):
        if period <= 0:
            raise ValueError("period must be positive")
        self.period = period
        self._value: Optional[float] = None

    @abstractmethod
    def update(self, sample: float) -> Optional[float]:
        """Feed the next sample; returns the current value or None."""

    @abstractmethod
    def reset(self):
        """Return to the initial, empty state."""

    @property
    def value(self) -> Optional[float]:
        """Value returned by the last update (None while warming up)."""
        return self._value

    def is_ready(self) -> bool:
        return self._value is not None

    def __repr__(self):
        return f"{self.__class__.__name__}(period={self.period}, value={self._value})"


__all__ = [
    'RingBuffer',
    'StreamingIndicator',
]
