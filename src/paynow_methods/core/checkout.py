"""
Checkout wiring: which payment renderers to register, and the Apple Pay
capability flag that the browser hands back to the server.

The browser decides whether it can pay with Apple Pay and stores the answer
in a short-lived ``applePayEnabled`` cookie. The next server request reads
that cookie back through :func:`read_apple_pay_flag`; nothing else is shared
between the two requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from http.cookies import SimpleCookie
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from .config import GatewayConfig

if TYPE_CHECKING:
    from .selector import PaymentMethodSelector

__all__ = [
    "APPLE_PAY_COOKIE",
    "APPLE_PAY_COOKIE_MAX_AGE",
    "BLIK_GATEWAY",
    "CARD_GATEWAY",
    "MAIN_GATEWAY",
    "RENDERER_COMPONENTS",
    "Renderer",
    "apple_pay_cookie",
    "build_checkout_config",
    "read_apple_pay_flag",
    "register_renderers",
]

APPLE_PAY_COOKIE = "applePayEnabled"
APPLE_PAY_COOKIE_MAX_AGE = 600

MAIN_GATEWAY = "paynow_gateway"
BLIK_GATEWAY = "paynow_blik_gateway"
CARD_GATEWAY = "paynow_card_gateway"

RENDERER_COMPONENTS = {
    MAIN_GATEWAY: "Paynow_PaymentGateway/js/view/payment/method-renderer/paynow_gateway",
    BLIK_GATEWAY: "Paynow_PaymentGateway/js/view/payment/paynow_blik_gateway",
    CARD_GATEWAY: "Paynow_PaymentGateway/js/view/payment/paynow_card_gateway",
}


@dataclass(frozen=True)
class Renderer:
    type: str
    component: str


def apple_pay_cookie(can_make_payments: Optional[Callable[[], bool]] = None) -> str:
    """
    Return the ``Set-Cookie`` value recording Apple Pay capability.

    ``can_make_payments`` is the wallet's capability probe, or ``None`` when the
    device has no wallet API at all.
    """
    enabled = bool(can_make_payments()) if can_make_payments is not None else False
    cookie: SimpleCookie = SimpleCookie()
    cookie[APPLE_PAY_COOKIE] = "1" if enabled else "0"
    morsel = cookie[APPLE_PAY_COOKIE]
    morsel["path"] = "/"
    morsel["max-age"] = APPLE_PAY_COOKIE_MAX_AGE
    morsel["samesite"] = "Lax"
    return morsel.OutputString()


def read_apple_pay_flag(cookies: Mapping[str, Any]) -> bool:
    # Client-controlled: only the exact string "1" counts.
    value = cookies.get(APPLE_PAY_COOKIE, "0")
    # SimpleCookie maps names to Morsels rather than plain strings.
    value = getattr(value, "value", value)
    return value == "1"


def register_renderers(payment_config: Mapping[str, Mapping[str, Any]]) -> List[Renderer]:
    """
    Renderers for every gateway whose ``isActive`` flag is set, main first.
    """
    renderers: List[Renderer] = []
    for method_code, component in RENDERER_COMPONENTS.items():
        if (payment_config.get(method_code) or {}).get("isActive"):
            renderers.append(Renderer(type=method_code, component=component))
    return renderers


def build_checkout_config(
    config: GatewayConfig,
    selector: "PaymentMethodSelector",
    currency: Optional[str] = None,
    amount: Optional[Union[Decimal, float, int, str]] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Build the per-gateway settings that :func:`register_renderers` consumes.
    """
    payment_config: Dict[str, Dict[str, Any]] = {
        MAIN_GATEWAY: {"isActive": False, "paymentMethods": []},
        BLIK_GATEWAY: {"isActive": False, "paymentMethodId": None},
        CARD_GATEWAY: {"isActive": False, "paymentMethodId": None},
    }
    if not (config.active and config.is_configured()):
        return payment_config

    methods = selector.list_available_payload(currency, amount)
    payment_config[MAIN_GATEWAY] = {
        "isActive": bool(methods),
        "paymentMethods": methods,
    }

    if config.is_blik_active():
        blik = selector.get_blik_method(currency, amount)
        if blik is not None:
            payment_config[BLIK_GATEWAY] = {"isActive": True, "paymentMethodId": blik.id}

    if config.card_active:
        card = selector.get_card_method(currency, amount)
        if card is not None:
            payment_config[CARD_GATEWAY] = {"isActive": True, "paymentMethodId": card.id}

    return payment_config
