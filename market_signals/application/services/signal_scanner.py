"""
Signal Scanner
==============
Fetches multi-timeframe candles for a symbol universe and turns them into
TradingSignals, one chunk of symbols at a time.
"""

import asyncio
import time
from typing import Any, Callable, Iterable, List, Optional

from ...core.logger import StructuredLogger
from ...core.time_manager import time_bucket
from ...domain.services.streaming_indicator_engine.caching.cache_manager import IndicatorCache
from ...domain.services.streaming_indicator_engine.core.types import (
    MISSING,
    CandleSnapshot,
    TimeframeSnapshot,
    TradingSignal,
)
from ...infrastructure.config.settings import SignalSettings
from .signal_analyzer import SignalAnalyzer
from .timeframe_processor import ParallelTimeframeProcessor


class SignalScanner:
    """
    Scans up to ``max_symbols`` symbols in chunks of ``chunk_size``.

    Each symbol's signal is cached for one ``signal_ttl_seconds`` bucket.
    A symbol whose fetch fails, or whose response for any timeframe is
    unsuccessful, is skipped without affecting the others.
    """

    def __init__(self,
                 processor: ParallelTimeframeProcessor,
                 analyzer: SignalAnalyzer,
                 cache: IndicatorCache,
                 logger: StructuredLogger,
                 settings: Optional[SignalSettings] = None,
                 clock: Callable[[], float] = time.time):
        self.processor = processor
        self.analyzer = analyzer
        self.cache = cache
        self.logger = logger
        self.settings = settings or SignalSettings()
        self._clock = clock

    async def scan(self, symbols: Iterable[str]) -> List[TradingSignal]:
        limited = list(symbols)[:self.settings.max_symbols]
        timestamp = self._clock()
        chunk_size = max(1, self.settings.chunk_size)

        signals: List[TradingSignal] = []
        for start in range(0, len(limited), chunk_size):
            chunk = limited[start:start + chunk_size]
            outcomes = await asyncio.gather(*(self._scan_symbol(symbol, timestamp) for symbol in chunk))
            signals.extend(signal for signal in outcomes if signal is not None)

        self.logger.debug("signal_scanner.scan_completed", {
            "requested": len(limited),
            "signals": len(signals),
            "actionable": sum(1 for s in signals if s.should_execute)
        })
        return signals

    async def _scan_symbol(self, symbol: str, timestamp: float) -> Optional[TradingSignal]:
        cache_key = f"signal:{symbol}-{time_bucket(timestamp, self.settings.signal_ttl_seconds)}"
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        timeframes = list(self.settings.timeframes)
        try:
            responses = await self.processor.process_symbol(symbol, timeframes)
            snapshots = self._to_snapshots(timeframes, responses)
        except Exception as e:
            self.logger.error("signal_scanner.symbol_failed", {
                "symbol": symbol,
                "error": str(e),
                "error_type": type(e).__name__
            })
            return None

        if snapshots is None:
            self.logger.debug("signal_scanner.unsuccessful_response", {"symbol": symbol})
            return None

        analysis = self.analyzer.analyze(symbol, snapshots)
        try:
            signal = TradingSignal(
                symbol=symbol,
                signal=analysis.signal,
                confidence=analysis.confidence,
                reason=analysis.reason,
                timestamp=timestamp,
                timeframes=snapshots,
                should_execute=self.analyzer.should_execute(analysis),
            )
        finally:
            self.analyzer.pool.release(analysis)

        self.cache.set(cache_key, signal, self.settings.signal_ttl_seconds)
        return signal

    @staticmethod
    def _to_snapshots(timeframes: List[str], responses: List[Any]) -> Optional[List[TimeframeSnapshot]]:
        """Map ``{"success": bool, "data": [rows...]}`` responses to snapshots."""
        snapshots = []
        for timeframe, response in zip(timeframes, responses):
            if not isinstance(response, dict) or not response.get("success"):
                return None
            rows = response.get("data") or []
            snapshots.append(TimeframeSnapshot(
                timeframe=timeframe,
                current=CandleSnapshot.from_dict(rows[0]) if len(rows) > 0 else None,
                previous=CandleSnapshot.from_dict(rows[1]) if len(rows) > 1 else None,
            ))
        return snapshots
