"""
Core Exceptions - Market Signals
================================
Centralized exception definitions for candle fetching and batch processing.

Every failure here is local to one request: callers see it on the future of
the ``process_symbol`` call that owns the failing work.
"""


class MarketSignalsError(Exception):
    """Base exception for the market signals engine."""
    pass


class CandleFetchError(MarketSignalsError):
    """
    Raised when candles for a symbol/interval could not be fetched.

    Covers connection-level failures; subclasses narrow it down to an HTTP
    status or a request timeout.
    """
    def __init__(self, symbol: str, interval: str, message: str = None):
        self.symbol = symbol
        self.interval = interval
        self.message = message or f"Failed to fetch candles for {symbol}-{interval}"
        super().__init__(self.message)


class CandleHTTPError(CandleFetchError):
    """
    Raised when the candle endpoint answers with a non-2xx status.
    """
    def __init__(self, symbol: str, interval: str, status: int):
        self.status = status
        super().__init__(symbol, interval, f"HTTP {status} for {symbol}-{interval}")


class CandleRequestTimeoutError(CandleFetchError):
    """
    Raised when a candle request is aborted after its timeout.

    Distinct from CandleHTTPError so callers can tell a slow backend from a
    rejecting one.
    """
    def __init__(self, symbol: str, interval: str, timeout: float):
        self.timeout = timeout
        super().__init__(symbol, interval, f"Request for {symbol}-{interval} aborted after {timeout}s")


class SlotTimeoutError(MarketSignalsError):
    """
    Raised when waiting for a free concurrency slot takes too long.

    Only the waiting symbol fails; other queued or in-flight work continues.
    """
    def __init__(self, symbol: str, timeout: float):
        self.symbol = symbol
        self.timeout = timeout
        self.message = f"Timeout waiting for processing slot for {symbol} after {timeout}s"
        super().__init__(self.message)


class ProcessorClosedError(MarketSignalsError):
    """Raised for queued requests that were still pending when the processor closed."""
    def __init__(self, symbol: str):
        self.symbol = symbol
        self.message = f"Processor closed before {symbol} was processed"
        super().__init__(self.message)
