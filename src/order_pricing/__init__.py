"""
Order Pricing - line item and order total calculation

Computes subtotal, tax, discount and grand total for carts and orders under
tax-inclusive and tax-exclusive pricing, and verifies the pricing stored with
MongoDB orders.
"""

__version__ = "0.1.0"

from . import pricing
from . import utils
from .pricing import compute_line_item_total, compute_order_totals

__all__ = ["pricing", "utils", "compute_order_totals", "compute_line_item_total"]
