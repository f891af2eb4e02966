"""
Display formatters with per-kind memoization.
"""

from typing import Dict, Optional


class DisplayFormatter:
    """Formats prices, volumes and percentages for the dashboard."""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._price: Dict[float, str] = {}
        self._volume: Dict[float, str] = {}
        self._percentage: Dict[float, str] = {}

    def format_price(self, price: Optional[float]) -> str:
        if not price:
            return "N/A"
        cached = self._price.get(price)
        if cached is None:
            cached = self._price[price] = f"${price:.4f}"
        return cached

    def format_volume(self, volume: Optional[float]) -> str:
        if not volume:
            return "N/A"
        cached = self._volume.get(volume)
        if cached is not None:
            return cached

        if volume >= 1_000_000:
            formatted = f"{volume / 1_000_000:.1f}M"
        elif volume >= 1_000:
            formatted = f"{volume / 1_000:.1f}K"
        elif float(volume).is_integer():
            formatted = str(int(volume))
        else:
            formatted = str(volume)

        self._volume[volume] = formatted
        return formatted

    def format_percentage(self, value: Optional[float]) -> str:
        if value is None:
            return "N/A"
        cached = self._percentage.get(value)
        if cached is None:
            cached = self._percentage[value] = f"{value:.2f}%"
        return cached

    def cleanup(self) -> int:
        """Clear every memo that grew past max_entries; returns memos cleared."""
        cleared = 0
        for memo in (self._price, self._volume, self._percentage):
            if len(memo) > self.max_entries:
                memo.clear()
                cleared += 1
        return cleared

    def clear(self) -> None:
        self._price.clear()
        self._volume.clear()
        self._percentage.clear()

    @property
    def sizes(self) -> Dict[str, int]:
        return {
            "price": len(self._price),
            "volume": len(self._volume),
            "percentage": len(self._percentage),
        }
