"""
Command-line interface for inspecting the payment methods offered at checkout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Sequence, Tuple

import requests

from .api import (
    CheckoutContext,
    ConfigError,
    GatewayConfig,
    build_environment,
    create_selector,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid amount '{value}'") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"Amount must be finite, got '{value}'")
    return amount


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paynow-methods",
        description="List the Paynow payment methods a checkout would offer",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYNOW_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--cart-id", required=True, help="Cart the lookup is made for")
    parser.add_argument("--customer-id", help="Authenticated customer id, if any")
    parser.add_argument("--currency", help="ISO currency code, e.g. PLN")
    parser.add_argument("--amount", type=_amount, help="Order total in major units, e.g. 12.34")
    parser.add_argument(
        "--apple-pay",
        action="store_true",
        help="Pretend the browser reported Apple Pay support",
    )
    projection = parser.add_mutually_exclusive_group()
    projection.add_argument(
        "--blik",
        action="store_true",
        help="Only show the BLIK method",
    )
    projection.add_argument(
        "--card",
        action="store_true",
        help="Only show the card method",
    )
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    environment = build_environment(env_file=args.env_file, overrides=overrides)
    try:
        config = GatewayConfig.from_mapping(environment.variables)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if not config.is_configured():
        logging.warning(
            "Paynow is not configured; no payment methods will be offered "
            "(PAYNOW_API_KEY from %s, PAYNOW_SIGNATURE_KEY from %s)",
            environment.source_of("PAYNOW_API_KEY") or "nowhere",
            environment.source_of("PAYNOW_SIGNATURE_KEY") or "nowhere",
        )

    context = CheckoutContext(
        cart_id=args.cart_id,
        customer_id=args.customer_id,
        apple_pay_enabled=args.apple_pay,
    )
    selector = create_selector(context, config=config, session=requests.Session())

    result: Any
    if args.blik:
        method = selector.get_blik_method(args.currency, args.amount)
        result = method.to_payload() if method is not None else None
    elif args.card:
        method = selector.get_card_method(args.currency, args.amount)
        result = method.to_payload() if method is not None else None
    else:
        result = selector.list_available_payload(args.currency, args.amount)

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run_cli(argv))
