"""
Minimal script that builds the checkout payment config for one cart.

It prints the per-gateway settings a checkout page would receive and the
renderers that would be registered from them.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, Tuple

from paynow_methods import (
    CheckoutContext,
    ConfigError,
    build_checkout_config,
    create_selector,
    load_gateway_config,
    register_renderers,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Paynow checkout config for a cart")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYNOW_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
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
    parser.add_argument("--currency", default="PLN", help="ISO currency code (default: PLN)")
    parser.add_argument("--amount", default="100.00", help="Order total in major units")
    parser.add_argument(
        "--apple-pay-cookie",
        default="0",
        help="Raw applePayEnabled cookie value as sent by the browser",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_gateway_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    context = CheckoutContext.from_cookies(
        args.cart_id,
        {"applePayEnabled": args.apple_pay_cookie},
        customer_id=args.customer_id,
    )
    selector = create_selector(context, config=config)
    payment_config = build_checkout_config(config, selector, args.currency, args.amount)

    print(json.dumps(payment_config, indent=2))
    for renderer in register_renderers(payment_config):
        logging.info("Registering renderer %s -> %s", renderer.type, renderer.component)
    return 0


if __name__ == "__main__":
    sys.exit(main())
