"""
Object Pool
===========
Reuses short-lived records (e.g. signal analyses) instead of allocating a
new one per evaluation.
"""

from typing import Callable, Generic, List, Optional, TypeVar

from ..core.types import SignalAnalysis, SignalType

T = TypeVar('T')


class ObjectPool(Generic[T]):
    """
    LIFO free list of reusable objects.

    acquire() hands sole ownership to the caller; release() resets the
    object and takes ownership back. Callers must not touch an object after
    releasing it.
    """

    def __init__(self,
                 factory: Callable[[], T],
                 reset: Optional[Callable[[T], None]] = None,
                 initial_size: int = 10):
        """
        Args:
            factory: Builds a new object in its neutral state
            reset: Restores a released object to its neutral state
            initial_size: Objects pre-allocated at construction
        """
        self._factory = factory
        self._reset = reset
        self._pool: List[T] = [factory() for _ in range(initial_size)]

    def acquire(self) -> T:
        """Pop a pooled object, or build a new one when the pool is empty."""
        if self._pool:
            return self._pool.pop()
        return self._factory()

    def release(self, obj: T) -> None:
        """Reset ``obj`` and return it to the pool."""
        if self._reset is not None:
            self._reset(obj)
        self._pool.append(obj)

    @property
    def size(self) -> int:
        """Objects currently available."""
        return len(self._pool)

    def __len__(self) -> int:
        return len(self._pool)


def reset_signal_analysis(analysis: SignalAnalysis) -> None:
    analysis.signal = SignalType.NEUTRAL
    analysis.confidence = 0
    analysis.reason = ""


def create_signal_analysis_pool(initial_size: int = 10) -> ObjectPool[SignalAnalysis]:
    """Pool of SignalAnalysis records reset to NEUTRAL/0/""."""
    return ObjectPool(SignalAnalysis, reset_signal_analysis, initial_size)
