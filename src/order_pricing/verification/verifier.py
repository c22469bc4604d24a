"""Stored order verification: recompute pricing and compare with what was saved."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..pricing.engine import PricingEngine
from ..utils.config import Config
from ..utils.logging import get_logger
from .repository import OrderRepository

logger = get_logger(__name__)

# Stored pricing key -> OrderTotals attribute
PRICING_FIELDS = (
    ("subtotal", "subtotal"),
    ("taxAmount", "tax"),
    ("total", "total"),
    ("totalDiscount", "total_discount"),
)


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class OrderTotalsVerifier:
    """Compare a stored order's ``pricing`` block with recomputed totals.

    Checks:
    - order-level subtotal, taxAmount, total and totalDiscount (only the
      fields the stored order actually carries)
    - each item's stored ``totalPrice`` against its recomputed gross amount
    """

    def __init__(self, engine: Optional[PricingEngine] = None, tolerance: float = 0.01) -> None:
        self.engine = engine or PricingEngine()
        self.tolerance = tolerance

    def _is_within_tolerance(self, delta: float) -> bool:
        return abs(delta) < self.tolerance

    def _compare(self, stored: float, recomputed: float) -> Dict[str, Any]:
        delta = round(recomputed - stored, 10)
        return {
            "stored": stored,
            "recomputed": recomputed,
            "delta": delta,
            "is_valid": self._is_within_tolerance(delta),
        }

    def _verify_lines(self, items: List[Any]) -> List[Dict[str, Any]]:
        lines = []
        for index, item in enumerate(items):
            result = self.engine.line_total(item)
            line: Dict[str, Any] = {
                "index": index,
                "name": item.get("name", f"Item {index + 1}") if isinstance(item, dict) else f"Item {index + 1}",
                "result": result.to_dict(),
                "is_valid": True,
            }
            stored_total = _to_float(item.get("totalPrice")) if isinstance(item, dict) else None
            if stored_total is not None:
                comparison = self._compare(stored_total, result.line_total)
                line["totalPrice"] = comparison
                line["is_valid"] = comparison["is_valid"]
            lines.append(line)
        return lines

    def verify(self, order: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recompute an order's totals and compare them with the stored values.

        Args:
            order: Stored order (an ``orderList`` element) with ``items`` and
                ``pricing``

        Returns:
            Dict with ``order_number``, ``is_valid``, ``strategy``,
            ``recomputed`` (pricing block), ``fields`` and ``lines``
        """
        items = order.get("items") or []
        stored_pricing = order.get("pricing") or {}
        totals = self.engine.order_totals(items)

        fields: Dict[str, Dict[str, Any]] = {}
        for stored_key, attribute in PRICING_FIELDS:
            stored_value = _to_float(stored_pricing.get(stored_key))
            if stored_value is None:
                continue
            fields[stored_key] = self._compare(stored_value, getattr(totals, attribute))

        lines = self._verify_lines(items)
        is_valid = all(f["is_valid"] for f in fields.values()) and all(line["is_valid"] for line in lines)

        if not fields:
            logger.warning("Order %s has no stored pricing fields to compare", order.get("orderNumber"))
        logger.info(
            "Verified order %s: %s (%d pricing fields, %d lines)",
            order.get("orderNumber"), "PASSED" if is_valid else "FAILED", len(fields), len(lines),
        )

        return {
            "order_number": order.get("orderNumber"),
            "is_valid": is_valid,
            "strategy": self.engine.strategy.value,
            "recomputed": totals.to_pricing(stored_pricing.get("currency") or self.engine.currency),
            "fields": fields,
            "lines": lines,
        }


class OrderVerificationService:
    """High-level service: fetch a stored order and verify its pricing."""

    def __init__(
        self,
        db_name: Optional[str] = None,
        connection_url_env_key: Optional[str] = None,
        engine: Optional[PricingEngine] = None,
        config: Optional[Config] = None,
        tolerance: float = 0.01,
    ) -> None:
        self.config = config or Config(".env")
        self.verifier = OrderTotalsVerifier(
            engine=engine or PricingEngine.from_config(self.config),
            tolerance=tolerance,
        )
        self.db_name = db_name
        self.connection_url_env_key = connection_url_env_key

    def verify_order_by_number(self, order_number: str, theater_id: Optional[str] = None) -> Dict[str, Any]:
        """Verify the stored pricing of ``order_number``."""
        with OrderRepository(
            db_name=self.db_name,
            connection_url_env_key=self.connection_url_env_key,
            config=self.config,
        ) as repo:
            order = repo.get_order_by_number(order_number, theater_id=theater_id)
            if not order:
                raise ValueError(f"Order {order_number} not found")
            return self.verifier.verify(order)
