"""
Parallel Timeframe Processor
============================
Fetches several timeframe candle series per symbol with request coalescing,
batching, bounded concurrency and TTL caching.

Flow per ``process_symbol(symbol, timeframes)``:
1. Identical in-flight requests (same symbol, same set of timeframes) share
   one future.
2. New requests join a batch queue. A full batch flushes at once; a partial
   batch flushes after ``batch_delay``.
3. A flush runs up to ``batch_size`` items concurrently. Each item waits for
   one of ``max_concurrent`` slots (at most ``slot_timeout``), then resolves
   its timeframes concurrently through the cache or the HTTP client.
4. If items are still queued after a flush, the next flush is scheduled
   after ``followup_delay``.

A failure only fails the future of the item that owns it.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from ...core.exceptions import ProcessorClosedError, SlotTimeoutError
from ...core.logger import StructuredLogger
from ...core.time_manager import time_bucket
from ...domain.services.streaming_indicator_engine.caching.cache_manager import IndicatorCache
from ...domain.services.streaming_indicator_engine.core.types import MISSING
from ...infrastructure.exchanges.candle_rest_client import CandleRestClient


@dataclass
class BatchItem:
    """Queued request; terminal once its future is done"""
    symbol: str
    timeframes: List[str]
    future: asyncio.Future


class ParallelTimeframeProcessor:
    """
    Batching, deduplicating, concurrency-bounded candle fetcher.

    Must be used from within a running event loop. All shared state is
    mutated between awaits only, so no locks are needed.
    """

    def __init__(self,
                 client: CandleRestClient,
                 cache: IndicatorCache,
                 logger: StructuredLogger,
                 max_concurrent: int = 8,
                 batch_size: int = 6,
                 batch_delay: float = 0.1,
                 followup_delay: float = 0.05,
                 slot_timeout: float = 5.0,
                 cache_ttl: float = 30.0,
                 cache_bucket_seconds: float = 30.0,
                 preload_limit: int = 12,
                 clock: Callable[[], float] = time.time):
        self.client = client
        self.cache = cache
        self.logger = logger
        self.max_concurrent = max_concurrent
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.followup_delay = followup_delay
        self.slot_timeout = slot_timeout
        self.cache_ttl = cache_ttl
        self.cache_bucket_seconds = cache_bucket_seconds
        self.preload_limit = preload_limit
        self._clock = clock

        self._in_flight: Dict[str, BatchItem] = {}
        self._batch_queue: List[BatchItem] = []
        self._batch_timer: Optional[asyncio.TimerHandle] = None
        self._batch_tasks: Set[asyncio.Task] = set()
        self._slots = asyncio.Semaphore(max_concurrent)
        self._active_requests = 0
        self._closed = False

        # Statistics
        self._batches_flushed = 0
        self._items_completed = 0
        self._items_failed = 0

    @staticmethod
    def dedup_key(symbol: str, timeframes: Iterable[str]) -> str:
        return f"{symbol}-{','.join(sorted(timeframes))}"

    def process_symbol(self, symbol: str, timeframes: Iterable[str]) -> asyncio.Future:
        """
        Request candles of ``timeframes`` for ``symbol``.

        Concurrent calls for the same symbol and timeframe set return the
        same future, whose result lists one response per timeframe in the
        order the first caller gave them.

        Returns:
            Future resolving to a list of candle responses
        """
        timeframes = list(timeframes)
        key = self.dedup_key(symbol, timeframes)

        existing = self._in_flight.get(key)
        if existing is not None:
            return existing.future

        loop = asyncio.get_running_loop()
        future = loop.create_future()
        if self._closed:
            future.set_exception(ProcessorClosedError(symbol))
            return future

        item = BatchItem(symbol, timeframes, future)
        self._in_flight[key] = item
        future.add_done_callback(lambda f, k=key: self._forget_in_flight(k, f))

        self._batch_queue.append(item)
        self._schedule_batch_processing()
        return future

    def _forget_in_flight(self, key: str, future: asyncio.Future) -> None:
        item = self._in_flight.get(key)
        if item is not None and item.future is future:
            del self._in_flight[key]

    def _schedule_batch_processing(self) -> None:
        if len(self._batch_queue) >= self.batch_size:
            self._cancel_batch_timer()
            self._start_batch()
            return

        if self._batch_timer is None:
            loop = asyncio.get_running_loop()
            self._batch_timer = loop.call_later(self.batch_delay, self._on_batch_timer)

    def _on_batch_timer(self) -> None:
        self._batch_timer = None
        self._start_batch()

    def _cancel_batch_timer(self) -> None:
        if self._batch_timer is not None:
            self._batch_timer.cancel()
            self._batch_timer = None

    def _start_batch(self) -> None:
        if not self._batch_queue or self._closed:
            return

        batch = self._batch_queue[:self.batch_size]
        del self._batch_queue[:self.batch_size]
        self._batches_flushed += 1

        task = asyncio.get_running_loop().create_task(self._process_batch(batch))
        self._batch_tasks.add(task)
        task.add_done_callback(self._batch_tasks.discard)

    async def _process_batch(self, batch: List[BatchItem]) -> None:
        self.logger.debug("timeframe_processor.batch_started", {
            "items": len(batch),
            "symbols": [item.symbol for item in batch],
            "queued": len(self._batch_queue)
        })

        await asyncio.gather(*(self._process_item(item) for item in batch))

        if self._batch_queue and not self._closed and self._batch_timer is None:
            loop = asyncio.get_running_loop()
            self._batch_timer = loop.call_later(self.followup_delay, self._on_batch_timer)

    async def _process_item(self, item: BatchItem) -> None:
        try:
            result = await self._execute_timeframe_requests(item.symbol, item.timeframes)
        except Exception as e:
            self._items_failed += 1
            self.logger.warning("timeframe_processor.item_failed", {
                "symbol": item.symbol,
                "timeframes": item.timeframes,
                "error": str(e),
                "error_type": type(e).__name__
            })
            if not item.future.done():
                item.future.set_exception(e)
        else:
            self._items_completed += 1
            if not item.future.done():
                item.future.set_result(result)

    async def _execute_timeframe_requests(self, symbol: str, timeframes: List[str]) -> List[Any]:
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.slot_timeout)
        except asyncio.TimeoutError:
            raise SlotTimeoutError(symbol, self.slot_timeout) from None

        self._active_requests += 1
        try:
            results = await asyncio.gather(
                *(self._resolve_timeframe(symbol, interval) for interval in timeframes),
                return_exceptions=True
            )
        finally:
            self._active_requests -= 1
            self._slots.release()

        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def _resolve_timeframe(self, symbol: str, interval: str) -> Any:
        bucket = time_bucket(self._clock(), self.cache_bucket_seconds)
        cache_key = f"{symbol}-{interval}-{bucket}"

        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        data = await self.client.fetch_candles(symbol, interval)
        self.cache.set(cache_key, data, self.cache_ttl)
        return data

    async def preload_symbols(self, symbols: Iterable[str], timeframes: Iterable[str]) -> int:
        """
        Warm the cache for the first ``preload_limit`` symbols.

        Failures are logged per symbol and never raised.

        Returns:
            Number of symbols preloaded successfully
        """
        timeframes = list(timeframes)
        priority_symbols = list(symbols)[:self.preload_limit]

        async def _preload(symbol: str) -> bool:
            try:
                await self.process_symbol(symbol, timeframes)
                return True
            except Exception as e:
                self.logger.warning("timeframe_processor.preload_failed", {
                    "symbol": symbol,
                    "error": str(e)
                })
                return False

        outcomes = await asyncio.gather(*(_preload(symbol) for symbol in priority_symbols))
        return sum(1 for ok in outcomes if ok)

    async def aclose(self) -> None:
        """
        Stop scheduling. Queued and unfinished requests fail with
        ProcessorClosedError.
        """
        self._closed = True
        self._cancel_batch_timer()

        for item in self._batch_queue:
            if not item.future.done():
                item.future.set_exception(ProcessorClosedError(item.symbol))
        self._batch_queue.clear()

        tasks = list(self._batch_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        for item in list(self._in_flight.values()):
            if not item.future.done():
                item.future.set_exception(ProcessorClosedError(item.symbol))

        self.logger.info("timeframe_processor.closed", self.get_stats())

    def get_stats(self) -> Dict[str, Any]:
        return {
            "queued": len(self._batch_queue),
            "in_flight": len(self._in_flight),
            "active_requests": self._active_requests,
            "max_concurrent": self.max_concurrent,
            "batches_flushed": self._batches_flushed,
            "items_completed": self._items_completed,
            "items_failed": self._items_failed,
        }
