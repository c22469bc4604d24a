"""
Command-line interface for Order Pricing.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo.errors import PyMongoError

from . import __version__
from .pricing.engine import PricingEngine
from .pricing.models import TotalStrategy
from .utils.config import Config
from .utils.logging import get_logger, setup_logging
from .verification.verifier import OrderVerificationService

logger = get_logger(__name__)

# Environment alias -> (db name key, connection url key)
ENV_KEYS = {
    "stg": ("DB_NAME_STG", "DB_CONNECTION_URL_STG"),
    "prod": ("DB_NAME_PROD", "DB_CONNECTION_URL_PROD"),
}
ENV_ALIASES = {
    "staging": "stg",
    "stg": "stg",
    "production": "prod",
    "prod": "prod",
}

PASSED = "\033[1;32mPASSED\033[0m"
FAILED = "\033[1;31mFAILED\033[0m"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Order Pricing - line item and order total calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  order-pricing order-totals --file cart.json
  order-pricing order-totals --file cart.json --strategy line_sum --json
  order-pricing line-total --file item.json
  order-pricing verify-order --order-number ORD-20250101-0001 --env production
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Order Pricing {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
    )
    parser.add_argument(
        "--env-file",
        help="Load settings (PRICING_*, CURRENCY, DB_*) from this .env file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    strategy_choices = [s.value for s in TotalStrategy]

    totals_parser = subparsers.add_parser(
        "order-totals",
        help="Compute subtotal, tax, discount and total for a cart",
    )
    totals_parser.add_argument(
        "--file",
        required=True,
        help="JSON file holding a list of line items or an object with 'items'",
    )
    totals_parser.add_argument(
        "--strategy",
        choices=strategy_choices,
        help="Order total formula (default: PRICING_TOTAL_STRATEGY or order_flag)",
    )
    totals_parser.add_argument(
        "--precision",
        type=int,
        choices=[0, 1, 2, 3, 4],
        help="Decimal places of the published amounts (default: 2)",
    )
    totals_parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine readable JSON instead of a table",
    )

    line_parser = subparsers.add_parser(
        "line-total",
        help="Compute the amounts of a single line item",
    )
    line_parser.add_argument(
        "--file",
        required=True,
        help="JSON file holding one line item object",
    )
    line_parser.add_argument(
        "--precision",
        type=int,
        choices=[0, 1, 2, 3, 4],
        help="Decimal places of the published amounts (default: 2)",
    )
    line_parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine readable JSON instead of a table",
    )

    verify_parser = subparsers.add_parser(
        "verify-order",
        help="Recompute a stored order's pricing and compare it",
    )
    verify_parser.add_argument(
        "--order-number",
        required=True,
        help="orderNumber of the stored order (e.g. ORD-20250101-0001)",
    )
    verify_parser.add_argument(
        "--theater-id",
        help="Restrict the lookup to one theater document",
    )
    verify_parser.add_argument(
        "--env",
        choices=["staging", "production", "stg", "prod"],
        default="staging",
        help="Database environment (default: staging)",
    )
    verify_parser.add_argument(
        "--strategy",
        choices=strategy_choices,
        help="Order total formula used for the recomputation",
    )

    return parser


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _extract_items(data: Any) -> List[Any]:
    """Accept either a bare list of line items or an object with an ``items`` list."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    raise ValueError("Expected a JSON list of line items or an object with an 'items' list")


def _build_engine(config: Config, strategy: Optional[str], precision: Optional[int]) -> PricingEngine:
    engine = PricingEngine.from_config(config)
    return PricingEngine(
        strategy=strategy or engine.strategy,
        precision=engine.precision if precision is None else precision,
        currency=engine.currency,
    )


def _print_box(rows: Sequence[Tuple[str, Any]]) -> None:
    """Print label/value rows inside a box."""
    label_width = max(len(label) for label, _ in rows)
    inner_width = max(len(f" {label.ljust(label_width)} : {value}") for label, value in rows) + 1
    print("┌" + "─" * inner_width + "┐")
    for label, value in rows:
        line = f" {label.ljust(label_width)} : {value}"
        print(f"│{line.ljust(inner_width)}│")
    print("└" + "─" * inner_width + "┘")


def _group_indian(digits: str) -> str:
    """Group integer digits the en-IN way: 1234567 -> 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def _fmt(value: float, precision: int, currency: str = "INR") -> str:
    """Format an amount with thousands separators (lakh/crore grouping for INR)."""
    precision = max(precision, 0)
    if currency.upper() != "INR":
        return f"{value:,.{precision}f}"
    text = f"{abs(value):.{precision}f}"
    digits, _, fraction = text.partition(".")
    sign = "-" if value < 0 and float(text) != 0 else ""
    grouped = sign + _group_indian(digits)
    return f"{grouped}.{fraction}" if fraction else grouped


def order_totals_command(
    path: str, config: Config, strategy: Optional[str] = None,
    precision: Optional[int] = None, as_json: bool = False,
) -> int:
    """Price a cart file and print its totals."""
    engine = _build_engine(config, strategy, precision)
    items = _extract_items(_load_json(path))
    logger.debug(f"Pricing {len(items)} line items from {path} ({engine.strategy.value})")

    totals = engine.order_totals(items)

    if as_json:
        payload: Dict[str, Any] = totals.to_dict()
        payload["currency"] = engine.currency
        payload["lines"] = [engine.line_total(item).to_dict() for item in items]
        print(json.dumps(payload, indent=2))
        return 0

    p = engine.precision
    _print_box([
        ("Line items", len(items)),
        ("Strategy", engine.strategy.value),
        ("Subtotal", f"{engine.currency} {_fmt(totals.subtotal, p, engine.currency)}"),
        ("Discount", f"{engine.currency} {_fmt(totals.total_discount, p, engine.currency)}"),
        ("Tax", f"{engine.currency} {_fmt(totals.tax, p, engine.currency)}"),
        ("Total", f"{engine.currency} {_fmt(totals.total, p, engine.currency)}"),
    ])
    return 0


def line_total_command(
    path: str, config: Config, precision: Optional[int] = None, as_json: bool = False,
) -> int:
    """Price a single line item file."""
    engine = _build_engine(config, None, precision)
    item = _load_json(path)
    if not isinstance(item, dict):
        raise ValueError("Expected a JSON object describing one line item")

    result = engine.line_total(item)
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    p = engine.precision
    _print_box([
        ("Tax mode", result.tax_mode.name),
        ("Line total", _fmt(result.line_total, p, engine.currency)),
        ("Discount", _fmt(result.discount_amount, p, engine.currency)),
        ("After discount", _fmt(result.price_after_discount, p, engine.currency)),
        ("Tax", _fmt(result.tax_amount, p, engine.currency)),
        ("Base price", _fmt(result.base_price, p, engine.currency)),
        ("Final total", _fmt(result.final_total, p, engine.currency)),
    ])
    return 0


def verify_order_command(
    order_number: str, config: Config, environment: str = "staging",
    theater_id: Optional[str] = None, strategy: Optional[str] = None,
) -> int:
    """
    Verify the pricing block of a stored order.

    Args:
        order_number: orderNumber of the order to verify
        config: Loaded configuration (DB and pricing settings)
        environment: Database environment ("staging", "production", "stg", "prod")
        theater_id: Optional theater document id to narrow the lookup
        strategy: Optional total strategy override

    Returns:
        0 when every compared value matches, 1 otherwise
    """
    env_key = ENV_ALIASES.get(environment.lower(), "stg")
    db_name_key, url_key = ENV_KEYS[env_key]
    db_name = os.getenv(db_name_key) or config.get("mongo_db")
    logger.info(f"Verifying pricing for order {order_number} in {environment} ({db_name})")

    service = OrderVerificationService(
        db_name=db_name,
        connection_url_env_key=url_key,
        engine=_build_engine(config, strategy, None),
        config=config,
    )
    result = service.verify_order_by_number(order_number, theater_id=theater_id)

    _print_box([
        ("Environment", environment.upper()),
        ("Database", db_name),
        ("Order", order_number),
        ("Strategy", result["strategy"]),
    ])

    print("\nPRICING VERIFICATION:")
    print("=" * 60)
    header = f"{'Field':<16}{'Stored':>14}{'Recomputed':>14}{'Delta':>12}"
    print(f"   {header}")
    print(f"   {'-' * len(header)}")
    for name, data in result["fields"].items():
        icon = "✅" if data["is_valid"] else "❌"
        print(f"{icon} {name:<16}{data['stored']:>14.2f}{data['recomputed']:>14.2f}{data['delta']:>12.2f}")

    mismatched_lines = [line for line in result["lines"] if not line["is_valid"]]
    if mismatched_lines:
        print("\nLINE ITEM MISMATCHES:")
        for line in mismatched_lines:
            stored = line["totalPrice"]
            print(
                f"   ❌ {line['name']}: stored totalPrice {stored['stored']:.2f}, "
                f"recomputed {stored['recomputed']:.2f} (Δ={stored['delta']:+.2f})"
            )

    print(f"\n   Overall Status: {PASSED if result['is_valid'] else FAILED}")
    return 0 if result["is_valid"] else 1


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = "DEBUG" if parsed_args.verbose else "INFO"
    setup_logging(level=log_level, log_file=parsed_args.log_file)

    if not parsed_args.command:
        parser.print_help()
        return 1

    try:
        if parsed_args.command == "order-totals":
            config = Config(parsed_args.env_file)
            return order_totals_command(
                parsed_args.file, config,
                strategy=parsed_args.strategy,
                precision=parsed_args.precision,
                as_json=parsed_args.json,
            )
        if parsed_args.command == "line-total":
            config = Config(parsed_args.env_file)
            return line_total_command(
                parsed_args.file, config,
                precision=parsed_args.precision,
                as_json=parsed_args.json,
            )
        if parsed_args.command == "verify-order":
            config = Config(parsed_args.env_file or ".env")
            return verify_order_command(
                parsed_args.order_number, config,
                environment=parsed_args.env,
                theater_id=parsed_args.theater_id,
                strategy=parsed_args.strategy,
            )
    except (OSError, ValueError, PyMongoError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Error: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
