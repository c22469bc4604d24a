"""Value types shared by the pricing engine components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class TaxMode(str, Enum):
    """Tax convention of a line item. Values are the stored ``gstType`` strings."""

    INCLUSIVE = "INCLUDE"
    EXCLUSIVE = "EXCLUDE"


class TotalStrategy(str, Enum):
    """How the order-level total is derived from the line results.

    ORDER_FLAG treats the whole order as tax-inclusive as soon as one line
    is INCLUSIVE. LINE_SUM adds up each line's own final total.
    """

    ORDER_FLAG = "order_flag"
    LINE_SUM = "line_sum"

    @classmethod
    def parse(cls, value: Any) -> "TotalStrategy":
        """Resolve a strategy from an enum member, its value or None (default)."""
        if value is None:
            return cls.ORDER_FLAG
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(
            f"Unknown total strategy {value!r}; expected one of "
            f"{', '.join(m.value for m in cls)}"
        )


@dataclass(frozen=True)
class LineItem:
    """A normalized line item. Build it with ``normalize_line_item``."""

    unit_price: float = 0.0
    quantity: int = 0
    tax_rate: float = 0.0
    tax_mode: TaxMode = TaxMode.EXCLUSIVE
    discount_percentage: float = 0.0

    @property
    def is_inclusive(self) -> bool:
        return self.tax_mode is TaxMode.INCLUSIVE


@dataclass(frozen=True)
class LineResult:
    """Per-line amounts.

    ``price_after_discount`` is the gross amount net of discount, tax still
    handled per mode. ``base_price`` is the amount net of both discount and
    tax.
    """

    line_total: float
    discount_amount: float
    price_after_discount: float
    tax_amount: float
    base_price: float
    final_total: float
    tax_mode: TaxMode = TaxMode.EXCLUSIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineTotal": self.line_total,
            "discountAmount": self.discount_amount,
            "priceAfterDiscount": self.price_after_discount,
            "taxAmount": self.tax_amount,
            "basePrice": self.base_price,
            "finalTotal": self.final_total,
            "taxMode": self.tax_mode.value,
        }


@dataclass(frozen=True)
class OrderTotals:
    """Order-level totals, already rounded."""

    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    total_discount: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "totalDiscount": self.total_discount,
        }

    def to_pricing(self, currency: str = "INR") -> Dict[str, Any]:
        """Shape used by the ``pricing`` block of a stored order."""
        return {
            "subtotal": self.subtotal,
            "taxAmount": self.tax,
            "total": self.total,
            "totalDiscount": self.total_discount,
            "currency": currency,
        }
