"""Utility helpers shared by the engine and the HTTP host."""

from .datetime_utils import coerce_instant, format_clock, local_date

__all__ = ["coerce_instant", "format_clock", "local_date"]
