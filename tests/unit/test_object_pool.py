"""
Tests for ObjectPool and the SignalAnalysis pool.
"""

from market_signals.domain.services.streaming_indicator_engine.core.types import SignalAnalysis, SignalType
from market_signals.domain.services.streaming_indicator_engine.memory.object_pool import (
    ObjectPool,
    create_signal_analysis_pool,
)


class TestObjectPool:

    def test_prepopulates_initial_size(self):
        pool = ObjectPool(dict, initial_size=3)

        assert pool.size == 3

    def test_acquire_from_empty_pool_builds_new_object(self):
        created = []

        def factory():
            created.append(object())
            return created[-1]

        pool = ObjectPool(factory, initial_size=0)
        obj = pool.acquire()

        assert obj is created[0]
        assert len(pool) == 0

    def test_release_resets_and_reuses(self):
        pool = ObjectPool(list, reset=lambda items: items.clear(), initial_size=1)
        items = pool.acquire()
        items.append("stale")

        pool.release(items)
        again = pool.acquire()

        assert again is items
        assert again == []

    def test_acquired_objects_are_distinct(self):
        pool = ObjectPool(dict, initial_size=2)

        assert pool.acquire() is not pool.acquire()


class TestSignalAnalysisPool:

    def test_released_record_is_neutral(self):
        pool = create_signal_analysis_pool(initial_size=1)
        analysis = pool.acquire()
        analysis.signal = SignalType.BUY
        analysis.confidence = 85
        analysis.reason = "BUY signal 2h (+5.0%) + valid RSI"

        pool.release(analysis)
        reused = pool.acquire()

        assert reused is analysis
        assert reused == SignalAnalysis()
