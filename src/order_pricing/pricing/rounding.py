"""Round-half-up helpers applied to every published amount."""

from __future__ import annotations

import math

from .models import LineResult

DEFAULT_PRECISION = 2


def round_half_up(value: float, precision: int = DEFAULT_PRECISION) -> float:
    """
    Round ``value`` to ``precision`` decimals, halves toward positive infinity.

    Works by scale-multiply-round-divide: ``floor(value * 10**p + 0.5) / 10**p``.
    Floating-point representation error is not compensated, so ``1.005``
    (stored as 1.00499...) rounds to ``1.0``.

    Args:
        value: Amount to round
        precision: Number of decimal places (default 2)

    Returns:
        Rounded amount; non-finite input is returned unchanged
    """
    if not math.isfinite(value):
        return value
    multiplier = 10 ** precision
    scaled = value * multiplier
    if not math.isfinite(scaled):
        # Already beyond the precision a float can carry
        return value
    rounded = math.floor(scaled + 0.5) / multiplier
    # Avoid publishing -0.0
    return rounded if rounded != 0 else 0.0


def round_line_result(result: LineResult, precision: int = DEFAULT_PRECISION) -> LineResult:
    """Return a copy of ``result`` with every amount rounded independently."""
    return LineResult(
        line_total=round_half_up(result.line_total, precision),
        discount_amount=round_half_up(result.discount_amount, precision),
        price_after_discount=round_half_up(result.price_after_discount, precision),
        tax_amount=round_half_up(result.tax_amount, precision),
        base_price=round_half_up(result.base_price, precision),
        final_total=round_half_up(result.final_total, precision),
        tax_mode=result.tax_mode,
    )
