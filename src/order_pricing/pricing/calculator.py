"""Line calculator: discount and tax for a single normalized line item."""

from __future__ import annotations

import math

from ..utils.logging import get_logger
from .models import LineItem, LineResult, TaxMode

logger = get_logger(__name__)


def _inclusive_tax(amount: float, rate_percent: float) -> float:
    """
    Extract the tax already contained in a tax-inclusive amount.

    tax = amount * (r / (100 + r)), e.g. 118 at 18% contains 18.
    """
    divisor = 100.0 + rate_percent
    if rate_percent == 0 or divisor == 0:
        return 0.0
    return amount * (rate_percent / divisor)


def _exclusive_tax(amount: float, rate_percent: float) -> float:
    """Tax added on top of a tax-exclusive amount."""
    if rate_percent == 0:
        return 0.0
    return amount * (rate_percent / 100.0)


def calculate_line(item: LineItem) -> LineResult:
    """
    Compute the unrounded amounts of one line item.

    The discount is taken from the gross line amount in both modes. For
    INCLUSIVE lines the tax is extracted from the discounted amount and is
    reported only; the payable amount stays the discounted amount. For
    EXCLUSIVE lines the tax is computed on the discounted amount and added.

    Args:
        item: Normalized line item

    Returns:
        Unrounded ``LineResult``; callers round at the point of output. A
        line whose amounts overflow the float range is an all-zero line.
    """
    try:
        line_total = item.unit_price * item.quantity
    except OverflowError:
        line_total = math.inf
    if item.discount_percentage > 0:
        discount_amount = line_total * (item.discount_percentage / 100.0)
    else:
        discount_amount = 0.0
    price_after_discount = line_total - discount_amount

    if item.tax_mode is TaxMode.INCLUSIVE:
        tax_amount = _inclusive_tax(price_after_discount, item.tax_rate)
        base_price = price_after_discount - tax_amount
        final_total = price_after_discount
    else:
        tax_amount = _exclusive_tax(price_after_discount, item.tax_rate)
        base_price = price_after_discount
        final_total = price_after_discount + tax_amount

    amounts = (line_total, discount_amount, price_after_discount, tax_amount, base_price, final_total)
    if not all(math.isfinite(amount) for amount in amounts):
        logger.warning("Line item amounts overflow the float range; using zero line")
        return LineResult(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, tax_mode=item.tax_mode)

    return LineResult(
        line_total=line_total,
        discount_amount=discount_amount,
        price_after_discount=price_after_discount,
        tax_amount=tax_amount,
        base_price=base_price,
        final_total=final_total,
        tax_mode=item.tax_mode,
    )
