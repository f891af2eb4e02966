"""
Core module for the market signals engine
"""

from .logger import StructuredLogger, get_logger
from .exceptions import (
    MarketSignalsError,
    CandleFetchError,
    CandleHTTPError,
    CandleRequestTimeoutError,
    SlotTimeoutError,
    ProcessorClosedError,
)

__all__ = [
    'StructuredLogger',
    'get_logger',
    'MarketSignalsError',
    'CandleFetchError',
    'CandleHTTPError',
    'CandleRequestTimeoutError',
    'SlotTimeoutError',
    'ProcessorClosedError',
]
