"""
Public facade for the Paynow payment methods package.

Integrators can ``from paynow_methods import ...`` everything they need to
build a selector for a checkout request without navigating the package.
"""

from .api import create_selector, list_payment_methods
from .core import (
    APPLE_PAY_COOKIE,
    CheckoutContext,
    ConfigError,
    GatewayConfig,
    GatewayEnvironment,
    GatewayParameters,
    PaymentMethod,
    PaymentMethodSelector,
    PaymentMethodType,
    PaymentMethods,
    PaynowClient,
    ProviderError,
    Renderer,
    SelectionRequest,
    apple_pay_cookie,
    build_checkout_config,
    build_environment,
    cart_idempotency_key,
    format_amount,
    load_env_file,
    load_gateway_config,
    read_apple_pay_flag,
    register_renderers,
)

__all__ = (
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
    "cart_idempotency_key",
    "create_selector",
    "format_amount",
    "list_payment_methods",
    "load_env_file",
    "load_gateway_config",
    "read_apple_pay_flag",
    "register_renderers",
)
