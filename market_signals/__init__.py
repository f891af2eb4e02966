"""
Market Signals Engine
=====================
Multi-timeframe candle fetching, streaming indicators and BUY/SELL signal
classification for a universe of trading symbols.
"""

__version__ = "1.0.0"
