"""Input normalizer: turn raw line item records into ``LineItem`` values.

Raw records come from request bodies, cart state or stored orders, so any
field may be missing, null, a number or a numeric string. Normalization never
raises; unusable values fall back to zero (or EXCLUSIVE for the tax mode).
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Tuple

from ..utils.logging import get_logger
from .models import LineItem, TaxMode

logger = get_logger(__name__)

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
# Tax mode text containing any of these marks a tax-inclusive price
INCLUSIVE_TOKENS: Tuple[str, ...] = ("INCLUDE", "INCLUSIVE")

# Lookup paths, first truthy value wins. Nested product paths match the shape
# of stored order items, which keep the full product document alongside.
UNIT_PRICE_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("unitPrice",),
    ("unit_price",),
    ("sellingPrice",),
)
QUANTITY_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("quantity",),
    ("qty",),
)
TAX_RATE_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("taxRate",),
    ("tax_rate",),
    ("product", "pricing", "taxRate"),
    ("product", "taxRate"),
)
TAX_MODE_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("taxMode",),
    ("tax_mode",),
    ("gstType",),
    ("product", "pricing", "gstType"),
    ("product", "gstType"),
)
DISCOUNT_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("discountPercentage",),
    ("discount_percentage",),
    ("product", "pricing", "discountPercentage"),
    ("product", "discountPercentage"),
)


def _is_truthy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _lookup(record: Mapping, path: Sequence[str]) -> Any:
    current: Any = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _first_value(record: Mapping, paths: Sequence[Sequence[str]]) -> Any:
    """Return the first truthy value found along ``paths`` (or None)."""
    for path in paths:
        value = _lookup(record, path)
        if _is_truthy(value):
            return value
    return None


def parse_number(value: Any) -> float:
    """
    Parse a real number leniently.

    Numbers are used as-is, strings contribute their leading decimal literal
    (``"12.5 INR"`` -> 12.5). Booleans, containers, unparsable text and
    non-finite values give ``0.0``.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return 0.0
        try:
            number = float(match.group(1))
        except (OverflowError, ValueError):
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_quantity(value: Any) -> int:
    """
    Parse an integer count leniently.

    Numbers truncate toward zero, strings contribute their leading integer
    literal (``"3.9"`` -> 3). Anything else gives ``0``, and so does a count
    too large to be represented as a float.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if not match:
            return 0
        try:
            value = int(match.group(1))
        except ValueError:
            return 0
    if not isinstance(value, int):
        return 0
    try:
        float(value)
    except OverflowError:
        return 0
    return value


def parse_tax_mode(value: Any) -> TaxMode:
    """Resolve a tax mode: text containing ``INCLUDE`` or ``INCLUSIVE`` (any case) is INCLUSIVE."""
    if isinstance(value, TaxMode):
        return value
    if value is None:
        return TaxMode.EXCLUSIVE
    try:
        text = str(value).upper()
    except ValueError:
        # int too large for str()
        return TaxMode.EXCLUSIVE
    if any(token in text for token in INCLUSIVE_TOKENS):
        return TaxMode.INCLUSIVE
    return TaxMode.EXCLUSIVE


def normalize_line_item(raw: Any) -> LineItem:
    """
    Build a ``LineItem`` from a raw record without ever failing.

    Args:
        raw: Mapping with camelCase (wire) or snake_case keys, or an
            already normalized ``LineItem``

    Returns:
        Normalized line item; a non-mapping input yields an all-zero item
    """
    if isinstance(raw, LineItem):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug("Line item of type %s is not a mapping; using zero item", type(raw).__name__)
        return LineItem()

    raw_mode: Optional[Any] = _first_value(raw, TAX_MODE_PATHS)
    return LineItem(
        unit_price=parse_number(_first_value(raw, UNIT_PRICE_PATHS)),
        quantity=parse_quantity(_first_value(raw, QUANTITY_PATHS)),
        tax_rate=parse_number(_first_value(raw, TAX_RATE_PATHS)),
        tax_mode=parse_tax_mode(raw_mode),
        discount_percentage=parse_number(_first_value(raw, DISCOUNT_PATHS)),
    )
