"""
Core primitives for looking up and selecting Paynow payment methods.
"""

from .checkout import (
    APPLE_PAY_COOKIE,
    Renderer,
    apple_pay_cookie,
    build_checkout_config,
    read_apple_pay_flag,
    register_renderers,
)
from .client import PaynowClient, ProviderError, calculate_signature
from .config import (
    ConfigError,
    GatewayConfig,
    GatewayParameters,
    load_gateway_config,
)
from .environment import GatewayEnvironment, build_environment, load_env_file
from .keys import (
    buyer_external_id,
    cart_idempotency_key,
    external_id_from_cart_id,
    format_amount,
    idempotency_key,
)
from .methods import PaymentMethod, PaymentMethods, PaymentMethodType
from .selector import (
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
    "PaymentMethodsProvider",
    "PaynowClient",
    "ProviderError",
    "Renderer",
    "SelectionRequest",
    "apple_pay_cookie",
    "build_checkout_config",
    "build_environment",
    "buyer_external_id",
    "calculate_signature",
    "cart_idempotency_key",
    "external_id_from_cart_id",
    "format_amount",
    "idempotency_key",
    "load_env_file",
    "load_gateway_config",
    "read_apple_pay_flag",
    "register_renderers",
]
