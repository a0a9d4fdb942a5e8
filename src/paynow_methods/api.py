"""
Public, high-level helpers for selecting Paynow payment methods at checkout.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .core.checkout import (
    APPLE_PAY_COOKIE,
    Renderer,
    apple_pay_cookie,
    build_checkout_config,
    read_apple_pay_flag,
    register_renderers,
)
from .core.client import PaynowClient, ProviderError
from .core.config import (
    ConfigError,
    GatewayConfig,
    GatewayParameters,
    load_gateway_config,
)
from .core.environment import GatewayEnvironment, build_environment, load_env_file
from .core.methods import PaymentMethod, PaymentMethods, PaymentMethodType
from .core.selector import (
    CheckoutContext,
    PaymentMethodSelector,
    PaymentMethodsProvider,
    SelectionRequest,
)

__all__ = [
    "APPLE_PAY_COOKIE",
    "CheckoutContext",
    "ConfigError",
    "GatewayConfig",
    "GatewayEnvironment",
    "GatewayParameters",
    "PaymentMethod",
    "PaymentMethodSelector",
    "PaymentMethodType",
    "PaymentMethods",
    "PaynowClient",
    "ProviderError",
    "Renderer",
    "SelectionRequest",
    "apple_pay_cookie",
    "build_checkout_config",
    "build_environment",
    "create_selector",
    "list_payment_methods",
    "load_env_file",
    "load_gateway_config",
    "read_apple_pay_flag",
    "register_renderers",
]


def _resolve_config(
    config: Optional[GatewayConfig],
    *,
    env_file: Optional[str],
    overrides: Optional[Mapping[str, str]],
    base: Optional[Mapping[str, str]],
    parameters: Optional[GatewayParameters],
) -> GatewayConfig:
    if config is not None:
        extras = (overrides, base, parameters)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built GatewayConfig or individual parameters, not both."
            )
        return config
    return load_gateway_config(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
    )


def create_selector(
    context: CheckoutContext,
    *,
    config: Optional[GatewayConfig] = None,
    provider: Optional[PaymentMethodsProvider] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[GatewayParameters] = None,
) -> PaymentMethodSelector:
    """
    Construct a :class:`PaymentMethodSelector` for one checkout request.

    Callers can either supply a ready-made :class:`GatewayConfig` or let the
    helper assemble one from environment data. ``provider`` defaults to a
    :class:`PaynowClient` bound to ``session``.
    """
    cfg = _resolve_config(
        config,
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
    )
    if provider is None:
        provider = PaynowClient(cfg, session=session)
    elif session is not None:
        raise ValueError("Provide either a provider or a session, not both.")
    return PaymentMethodSelector(provider, cfg, context)


def list_payment_methods(
    cart_id: Union[int, str],
    *,
    currency: Optional[str] = None,
    amount: Optional[Union[Decimal, float, int, str]] = None,
    customer_id: Optional[Union[int, str]] = None,
    cookies: Optional[Mapping[str, str]] = None,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    parameters: Optional[GatewayParameters] = None,
) -> List[Dict[str, Any]]:
    """
    One-shot helper returning the checkout payload for the general method list.
    """
    context = CheckoutContext.from_cookies(cart_id, cookies or {}, customer_id=customer_id)
    selector = create_selector(
        context,
        config=config,
        session=session,
        env_file=env_file,
        overrides=overrides,
        parameters=parameters,
    )
    return selector.list_available_payload(currency, amount)
