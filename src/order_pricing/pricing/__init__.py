"""Pricing engine entry point."""

from .engine import PricingEngine, compute_line_item_total, compute_order_totals
from .models import LineItem, LineResult, OrderTotals, TaxMode, TotalStrategy
from .normalizer import normalize_line_item
from .rounding import round_half_up

__all__ = [
    "PricingEngine",
    "compute_order_totals",
    "compute_line_item_total",
    "normalize_line_item",
    "round_half_up",
    "LineItem",
    "LineResult",
    "OrderTotals",
    "TaxMode",
    "TotalStrategy",
]
