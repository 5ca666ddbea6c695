"""Numeric guards shared by every engine.

Inputs arrive from free-text fields and sliders, so a value can be None,
an empty string, NaN or infinite at any moment. Every public calculation
routes its numbers through these helpers instead of raising.
"""

import math
from typing import Any, Optional


def safe_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce ``value`` to a finite float, or return ``default``.

    Numeric strings such as ``"6.5"`` are parsed. ``None``, blank strings,
    unparseable text, NaN and infinities all map to ``default``.
    """
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return min(high, max(low, value))


def rate_monthly_from_percent(annual_percent: Any) -> float:
    """Convert an annual percentage rate (6.5) to a monthly decimal rate."""
    return safe_number(annual_percent) / 100 / 12


def format_usd(amount: float) -> str:
    """Render whole-dollar currency for advisory messages, e.g. ``$12,345``."""
    return f"${safe_number(amount):,.0f}"


__all__ = [
    "safe_number",
    "clamp",
    "rate_monthly_from_percent",
    "format_usd",
]
