"""
Candle REST Client
==================
Fetches candle series for one symbol/interval from the market data backend.
"""

import asyncio
import time
from typing import Any, Dict, Optional

import aiohttp

from ...core.exceptions import CandleFetchError, CandleHTTPError, CandleRequestTimeoutError
from ...core.logger import StructuredLogger


class CandleRestClient:
    """
    HTTP client for ``GET /api/trading/candles/{symbol}``.

    Each request carries its own timeout, so aborting one request never
    touches its siblings. The JSON body is returned as-is.
    """

    CANDLES_PATH = "/api/trading/candles/{symbol}"

    def __init__(self,
                 logger: StructuredLogger,
                 base_url: str = "http://localhost:3001",
                 limit: int = 50,
                 request_timeout: float = 8.0,
                 cache_control: str = "max-age=30",
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            logger: Structured logger instance
            base_url: Backend root URL
            limit: Candles requested per call
            request_timeout: Total timeout per request in seconds
            cache_control: Cache-Control header sent with every request
            session: Optional pre-built session (not closed by stop())
        """
        self.logger = logger
        self.base_url = base_url.rstrip('/')
        self.limit = limit
        self.request_timeout = request_timeout
        self.headers = {
            "Accept": "application/json",
            "Cache-Control": cache_control,
        }
        self.session = session
        self._owns_session = session is None

        # Statistics
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.start_time = time.time()

    async def start(self) -> None:
        """Create the HTTP session if none was supplied."""
        if not self.session:
            self.session = aiohttp.ClientSession(headers={"User-Agent": "MarketSignals/1.0"})
            self._owns_session = True
            self.logger.info("candle_rest_client.started", {"base_url": self.base_url})

    async def stop(self) -> None:
        """Close the HTTP session if this client created it."""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None
            self.logger.info("candle_rest_client.stopped", self.get_stats())

    async def fetch_candles(self, symbol: str, interval: str) -> Any:
        """
        Fetch candles for one symbol and interval.

        Returns:
            Decoded JSON body

        Raises:
            CandleHTTPError: non-2xx response
            CandleRequestTimeoutError: request aborted after request_timeout
            CandleFetchError: connection or decoding failure
        """
        if not self.session:
            await self.start()

        url = f"{self.base_url}{self.CANDLES_PATH.format(symbol=symbol)}"
        params = {"interval": interval, "limit": str(self.limit)}
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        self.total_requests += 1

        try:
            async with self.session.get(url, params=params, headers=self.headers, timeout=timeout) as response:
                if not 200 <= response.status < 300:
                    self.logger.warning("candle_rest_client.http_error", {
                        "symbol": symbol,
                        "interval": interval,
                        "status": response.status
                    })
                    raise CandleHTTPError(symbol, interval, response.status)
                data = await response.json()
        except asyncio.TimeoutError as e:
            self.failed_requests += 1
            self.logger.warning("candle_rest_client.request_timeout", {
                "symbol": symbol,
                "interval": interval,
                "timeout_seconds": self.request_timeout
            })
            raise CandleRequestTimeoutError(symbol, interval, self.request_timeout) from e
        except CandleHTTPError:
            self.failed_requests += 1
            raise
        except (aiohttp.ClientError, ValueError) as e:
            self.failed_requests += 1
            self.logger.error("candle_rest_client.request_error", {
                "symbol": symbol,
                "interval": interval,
                "error": str(e)
            })
            raise CandleFetchError(symbol, interval, f"Request for {symbol}-{interval} failed: {e}") from e

        self.successful_requests += 1
        return data

    def get_stats(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "uptime_seconds": time.time() - self.start_time,
        }
