"""
Tests for DisplayFormatter.
"""

import pytest

from market_signals.domain.utils import DisplayFormatter


@pytest.fixture
def formatter():
    return DisplayFormatter(max_entries=3)


class TestFormatting:

    @pytest.mark.parametrize("price,expected", [
        (50000, "$50000.0000"),
        (0.12345678, "$0.1235"),
        (0, "N/A"),
        (None, "N/A"),
    ])
    def test_format_price(self, formatter, price, expected):
        assert formatter.format_price(price) == expected

    @pytest.mark.parametrize("volume,expected", [
        (2_500_000, "2.5M"),
        (1_000_000, "1.0M"),
        (1_500, "1.5K"),
        (999, "999"),
        (12.5, "12.5"),
        (0, "N/A"),
        (None, "N/A"),
    ])
    def test_format_volume(self, formatter, volume, expected):
        assert formatter.format_volume(volume) == expected

    @pytest.mark.parametrize("value,expected", [
        (5, "5.00%"),
        (-1.234, "-1.23%"),
        (0, "0.00%"),
        (None, "N/A"),
    ])
    def test_format_percentage(self, formatter, value, expected):
        assert formatter.format_percentage(value) == expected


class TestMemoCleanup:

    def test_cleanup_clears_only_oversized_memos(self, formatter):
        for price in (1, 2, 3, 4):
            formatter.format_price(price)
        formatter.format_volume(1500)

        cleared = formatter.cleanup()

        assert cleared == 1
        assert formatter.sizes == {"price": 0, "volume": 1, "percentage": 0}

    def test_memo_does_not_change_results(self, formatter):
        first = formatter.format_volume(2_500_000)
        second = formatter.format_volume(2_500_000)

        assert first == second == "2.5M"
        assert formatter.sizes["volume"] == 1
