"""
Engine Context - Composition Root
=================================
Builds every collaborator of the signal engine from AppSettings and hands
them out by constructor injection.

RULES:
- NO module-level instances; create one context per application
- NO background timers; the owner drives maintenance_tick()
- Only object assembly and lifecycle here, no signal logic
"""

import random
import time
from typing import Any, Callable, Dict, Optional

import aiohttp

from ...application.services.signal_analyzer import SignalAnalyzer
from ...application.services.signal_scanner import SignalScanner
from ...application.services.timeframe_processor import ParallelTimeframeProcessor
from ...core.logger import StructuredLogger, get_logger
from ...domain.services.indicators.signal_helpers import (
    HighPerformanceVolumeDetector,
    OptimizedMADistanceCalculator,
)
from ...domain.services.streaming_indicator_engine.caching.cache_manager import IndicatorCache
from ...domain.services.streaming_indicator_engine.core.types import SignalAnalysis
from ...domain.services.streaming_indicator_engine.memory.object_pool import (
    ObjectPool,
    create_signal_analysis_pool,
)
from ...domain.utils.formatters import DisplayFormatter
from ..config.settings import AppSettings
from ..exchanges.candle_rest_client import CandleRestClient


class IndicatorEngineContext:
    """
    Owns the shared cache, pool, memo tables and network stack.

    Everything that used to be process-global lives on this object, so two
    contexts never share state.
    """

    def __init__(self,
                 settings: AppSettings,
                 logger: StructuredLogger,
                 cache: IndicatorCache,
                 pool: ObjectPool[SignalAnalysis],
                 distance_calculator: OptimizedMADistanceCalculator,
                 volume_detector: HighPerformanceVolumeDetector,
                 formatter: DisplayFormatter,
                 client: CandleRestClient,
                 processor: ParallelTimeframeProcessor,
                 analyzer: SignalAnalyzer,
                 scanner: SignalScanner,
                 rng: Callable[[], float] = random.random):
        self.settings = settings
        self.logger = logger
        self.cache = cache
        self.pool = pool
        self.distance_calculator = distance_calculator
        self.volume_detector = volume_detector
        self.formatter = formatter
        self.client = client
        self.processor = processor
        self.analyzer = analyzer
        self.scanner = scanner
        self._rng = rng
        self._ticks = 0
        self._closed = False

    @classmethod
    def from_settings(cls,
                      settings: Optional[AppSettings] = None,
                      session: Optional[aiohttp.ClientSession] = None,
                      logger: Optional[StructuredLogger] = None,
                      rng: Callable[[], float] = random.random,
                      clock: Callable[[], float] = time.time) -> 'IndicatorEngineContext':
        """
        Assemble a context.

        Args:
            settings: Application settings (defaults read from the environment)
            session: Optional aiohttp session; the client never closes it
            logger: Optional logger, defaults to get_logger(__name__)
            rng: Source of [0, 1) floats for the memo-clearing draw
            clock: Seconds since the epoch; used for TTLs and time buckets
        """
        settings = settings or AppSettings()
        logger = logger or get_logger(__name__, settings.logging)

        cache_cfg = settings.cache
        processor_cfg = settings.processor
        api_cfg = settings.candle_api
        signal_cfg = settings.signals

        cache = IndicatorCache(
            default_ttl=cache_cfg.default_ttl_seconds,
            max_size=cache_cfg.max_size,
            logger=logger,
            clock=clock,
        )
        pool = create_signal_analysis_pool(cache_cfg.pool_initial_size)
        distance_calculator = OptimizedMADistanceCalculator()
        volume_detector = HighPerformanceVolumeDetector(
            max_symbols=signal_cfg.max_tracked_symbols,
            elevated_threshold=signal_cfg.volume_elevated_threshold,
        )
        formatter = DisplayFormatter(max_entries=cache_cfg.formatter_max_entries)

        client = CandleRestClient(
            logger=logger,
            base_url=api_cfg.base_url,
            limit=api_cfg.candle_limit,
            request_timeout=api_cfg.request_timeout_seconds,
            cache_control=api_cfg.cache_control,
            session=session,
        )
        processor = ParallelTimeframeProcessor(
            client=client,
            cache=cache,
            logger=logger,
            max_concurrent=processor_cfg.max_concurrent,
            batch_size=processor_cfg.batch_size,
            batch_delay=processor_cfg.batch_delay_seconds,
            followup_delay=processor_cfg.followup_delay_seconds,
            slot_timeout=processor_cfg.slot_timeout_seconds,
            cache_ttl=processor_cfg.cache_ttl_seconds,
            cache_bucket_seconds=processor_cfg.cache_bucket_seconds,
            preload_limit=processor_cfg.preload_limit,
            clock=clock,
        )
        analyzer = SignalAnalyzer(pool, distance_calculator, volume_detector, signal_cfg)
        scanner = SignalScanner(processor, analyzer, cache, logger, signal_cfg, clock=clock)

        logger.info("engine_context.created", {
            "base_url": api_cfg.base_url,
            "max_concurrent": processor_cfg.max_concurrent,
            "batch_size": processor_cfg.batch_size,
            "cache_max_size": cache_cfg.max_size
        })

        return cls(
            settings=settings,
            logger=logger,
            cache=cache,
            pool=pool,
            distance_calculator=distance_calculator,
            volume_detector=volume_detector,
            formatter=formatter,
            client=client,
            processor=processor,
            analyzer=analyzer,
            scanner=scanner,
            rng=rng,
        )

    def maintenance_tick(self) -> Dict[str, Any]:
        """
        One cleanup pass over the shared tables.

        Trims the cache, clears oversized formatter memos and, with
        ``distance_memo_clear_probability``, empties the MA distance memo.

        Returns:
            Summary of what was removed plus current cache stats
        """
        self._ticks += 1
        cache_removed = self.cache.cleanup()
        formatter_memos_cleared = self.formatter.cleanup()

        distance_memo_cleared = False
        if self._rng() < self.settings.cache.distance_memo_clear_probability:
            self.distance_calculator.clear()
            distance_memo_cleared = True

        stats = {
            "tick": self._ticks,
            "cache_removed": cache_removed,
            "formatter_memos_cleared": formatter_memos_cleared,
            "distance_memo_cleared": distance_memo_cleared,
            "cache": self.cache.get_stats(),
        }
        self.logger.debug("engine_context.maintenance_tick", stats)
        return stats

    def reset(self) -> None:
        """Drop all cached and memoized state; counters and pool stay."""
        self.cache.clear()
        self.distance_calculator.clear()
        self.volume_detector.clear()
        self.formatter.clear()
        self.logger.info("engine_context.reset", {})

    def get_stats(self) -> Dict[str, Any]:
        return {
            "cache": self.cache.get_stats(),
            "processor": self.processor.get_stats(),
            "client": self.client.get_stats(),
            "pool_available": self.pool.size,
            "distance_memo_size": self.distance_calculator.cache_size,
            "tracked_volume_symbols": self.volume_detector.tracked_symbols,
            "formatter_memos": self.formatter.sizes,
        }

    async def aclose(self) -> None:
        """Close the processor, then the HTTP client. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        await self.processor.aclose()
        await self.client.stop()
        self.logger.info("engine_context.closed", {})

    async def __aenter__(self) -> 'IndicatorEngineContext':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
