"""
Engine Composition Root
=======================

Usage:
    from market_signals.infrastructure.container import IndicatorEngineContext

    context = IndicatorEngineContext.from_settings(settings)
    signals = await context.scanner.scan(["BTCUSDT", "ETHUSDT"])
    context.maintenance_tick()
    await context.aclose()
"""

from .engine_context import IndicatorEngineContext

__all__ = ['IndicatorEngineContext']
