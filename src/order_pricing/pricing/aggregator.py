"""Order aggregator: fold line results into order totals."""

from __future__ import annotations

import math
from typing import Iterable

from ..utils.logging import get_logger
from .models import LineResult, OrderTotals, TaxMode, TotalStrategy
from .rounding import DEFAULT_PRECISION, round_half_up

logger = get_logger(__name__)


def aggregate(
    results: Iterable[LineResult],
    strategy: TotalStrategy = TotalStrategy.ORDER_FLAG,
    precision: int = DEFAULT_PRECISION,
) -> OrderTotals:
    """
    Sum unrounded line results into rounded ``OrderTotals``.

    Subtotal, tax and discount are summed unrounded and rounded once each.
    With ORDER_FLAG the total is derived from those rounded components: if
    any line is INCLUSIVE the whole order is treated as tax-embedded
    (``subtotal - discount``), otherwise tax is added on top. With LINE_SUM
    the total is the rounded sum of each line's own final total.

    Args:
        results: Unrounded per-line results, each carrying its tax mode
        strategy: Order total formula
        precision: Decimal places of the published amounts

    Returns:
        Rounded order totals; an empty input gives all zeros
    """
    subtotal = tax = discount = line_sum = 0.0
    has_inclusive_line = False

    for result in results:
        subtotal += result.line_total
        tax += result.tax_amount
        discount += result.discount_amount
        line_sum += result.final_total
        if result.tax_mode is TaxMode.INCLUSIVE:
            has_inclusive_line = True

    if not all(math.isfinite(amount) for amount in (subtotal, tax, discount, line_sum)):
        logger.warning("Order amounts overflow the float range; using zero totals")
        return OrderTotals()

    rounded_subtotal = round_half_up(subtotal, precision)
    rounded_tax = round_half_up(tax, precision)
    rounded_discount = round_half_up(discount, precision)

    if strategy is TotalStrategy.LINE_SUM:
        total = line_sum
    elif has_inclusive_line:
        total = rounded_subtotal - rounded_discount
    else:
        total = rounded_subtotal - rounded_discount + rounded_tax

    logger.debug(
        "Aggregated order: strategy=%s inclusive_line=%s subtotal=%s tax=%s discount=%s",
        strategy.value, has_inclusive_line, rounded_subtotal, rounded_tax, rounded_discount,
    )

    return OrderTotals(
        subtotal=rounded_subtotal,
        tax=rounded_tax,
        total=round_half_up(total, precision),
        total_discount=rounded_discount,
    )
