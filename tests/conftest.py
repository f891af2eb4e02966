"""
Shared pytest fixtures for unit and backend tests
=================================================
"""

from unittest.mock import MagicMock

import pytest

from tests.fixtures.market_data import bullish_responses, fake_clock, flat_responses  # noqa: F401


@pytest.fixture
def mock_logger():
    """StructuredLogger stand-in that records calls."""
    logger = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.debug = MagicMock()
    return logger
