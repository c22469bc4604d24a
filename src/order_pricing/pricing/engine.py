"""Public entry points of the pricing engine."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Union

from ..utils.config import Config
from ..utils.logging import get_logger
from .aggregator import aggregate
from .calculator import calculate_line
from .models import LineResult, OrderTotals, TotalStrategy
from .normalizer import normalize_line_item
from .rounding import DEFAULT_PRECISION, round_line_result

logger = get_logger(__name__)

StrategyLike = Union[TotalStrategy, str, None]


def compute_order_totals(
    line_items: Optional[Iterable[Any]],
    strategy: StrategyLike = None,
    precision: int = DEFAULT_PRECISION,
) -> OrderTotals:
    """
    Compute subtotal, tax, total and total discount for a whole order.

    Args:
        line_items: Raw line item records (mappings) or ``LineItem`` values;
            None or empty gives all-zero totals
        strategy: ``TotalStrategy`` or its string value; None keeps the
            order-wide INCLUSIVE flag behaviour
        precision: Decimal places of the published amounts

    Returns:
        Rounded ``OrderTotals``
    """
    resolved = TotalStrategy.parse(strategy)
    results = [calculate_line(normalize_line_item(raw)) for raw in (line_items or [])]
    return aggregate(results, strategy=resolved, precision=precision)


def compute_line_item_total(line_item: Any, precision: int = DEFAULT_PRECISION) -> LineResult:
    """Compute one line item's amounts in isolation, each field rounded."""
    return round_line_result(calculate_line(normalize_line_item(line_item)), precision)


class PricingEngine:
    """Pricing settings bundled with the engine entry points.

    Holds only immutable settings; every call is computed from its own input.
    """

    def __init__(
        self,
        strategy: StrategyLike = None,
        precision: int = DEFAULT_PRECISION,
        currency: str = "INR",
    ) -> None:
        self._strategy = TotalStrategy.parse(strategy)
        self._precision = precision
        self._currency = currency

    @classmethod
    def from_config(cls, config: Config) -> "PricingEngine":
        """Build an engine from ``Config``; unknown values fall back to defaults."""
        try:
            strategy = TotalStrategy.parse(config.get("total_strategy"))
        except ValueError:
            logger.warning(
                "Unknown PRICING_TOTAL_STRATEGY %r, using %s",
                config.get("total_strategy"), TotalStrategy.ORDER_FLAG.value,
            )
            strategy = TotalStrategy.ORDER_FLAG
        precision = config.get("precision", DEFAULT_PRECISION)
        if not isinstance(precision, int) or precision < 0:
            precision = DEFAULT_PRECISION
        return cls(strategy=strategy, precision=precision, currency=config.get("currency", "INR"))

    @property
    def strategy(self) -> TotalStrategy:
        return self._strategy

    @property
    def precision(self) -> int:
        return self._precision

    @property
    def currency(self) -> str:
        return self._currency

    def order_totals(self, line_items: Optional[Iterable[Any]]) -> OrderTotals:
        return compute_order_totals(line_items, strategy=self._strategy, precision=self._precision)

    def line_total(self, line_item: Any) -> LineResult:
        return compute_line_item_total(line_item, precision=self._precision)

    def pricing_block(self, line_items: Optional[Iterable[Any]]) -> Dict[str, Any]:
        """Totals in the shape of a stored order's ``pricing`` block."""
        return self.order_totals(line_items).to_pricing(self._currency)
