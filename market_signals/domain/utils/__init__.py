"""Utility helpers shared across domain modules."""

from .formatters import DisplayFormatter

__all__ = ["DisplayFormatter"]
