"""
Payment method selection for the checkout.

The selector is the only place that decides which provider methods a buyer
gets to see. CARD methods are never part of the general listing, BLIK
methods only when the store has BLIK turned on, and a failing provider
lookup degrades to "nothing available" instead of breaking the checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

from .checkout import read_apple_pay_flag
from .client import ProviderError
from .config import GatewayConfig
from .keys import buyer_external_id, cart_idempotency_key, format_amount
from .methods import PaymentMethod, PaymentMethods, PaymentMethodType

__all__ = [
    "CheckoutContext",
    "PaymentMethodSelector",
    "PaymentMethodsProvider",
    "SelectionRequest",
]

Amount = Union[Decimal, float, int, str]


class PaymentMethodsProvider(Protocol):
    def get_payment_methods(
        self,
        currency: Optional[str] = None,
        amount: Optional[int] = None,
        apple_pay_enabled: bool = False,
        idempotency_key: Optional[str] = None,
        buyer_external_id: Optional[str] = None,
    ) -> PaymentMethods:
        ...


@dataclass(frozen=True)
class CheckoutContext:
    """
    Per-request buyer context supplied by the host checkout.
    """

    cart_id: Union[int, str]
    customer_id: Optional[Union[int, str]] = None
    apple_pay_enabled: bool = False

    @classmethod
    def from_cookies(
        cls,
        cart_id: Union[int, str],
        cookies: Mapping[str, str],
        *,
        customer_id: Optional[Union[int, str]] = None,
    ) -> "CheckoutContext":
        return cls(
            cart_id=cart_id,
            customer_id=customer_id,
            apple_pay_enabled=read_apple_pay_flag(cookies),
        )


@dataclass(frozen=True)
class SelectionRequest:
    currency: Optional[str]
    amount: Optional[int]
    buyer_external_id: Optional[str]
    idempotency_key: str
    apple_pay_enabled: bool


class PaymentMethodSelector:
    def __init__(
        self,
        provider: PaymentMethodsProvider,
        config: GatewayConfig,
        context: CheckoutContext,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.config = config
        self.context = context
        self.logger = logger or logging.getLogger(__name__)

    def build_request(
        self,
        currency: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> SelectionRequest:
        customer_id = self.context.customer_id
        return SelectionRequest(
            currency=currency,
            amount=format_amount(amount),
            buyer_external_id=(
                buyer_external_id(customer_id, self.config.signature_key)
                if customer_id
                else None
            ),
            idempotency_key=cart_idempotency_key(self.context.cart_id),
            apple_pay_enabled=self.context.apple_pay_enabled,
        )

    def list_available(
        self,
        currency: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> List[PaymentMethod]:
        """
        Methods to offer in the general payment list, in provider order.
        """
        methods = self._fetch(currency, amount)
        if methods is None:
            return []

        blik_active = self.config.is_blik_active()
        return [
            method
            for method in methods.all()
            if method.type is not PaymentMethodType.CARD
            and (blik_active or method.type is not PaymentMethodType.BLIK)
        ]

    def list_available_payload(
        self,
        currency: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> List[Dict[str, Any]]:
        return [method.to_payload() for method in self.list_available(currency, amount)]

    def get_blik_method(
        self,
        currency: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> Optional[PaymentMethod]:
        methods = self._fetch(currency, amount, payment_method="BLIK")
        if methods is None:
            return None
        return next(iter(methods.only_blik()), None)

    def get_card_method(
        self,
        currency: Optional[str] = None,
        amount: Optional[Amount] = None,
    ) -> Optional[PaymentMethod]:
        methods = self._fetch(currency, amount, payment_method="card")
        if methods is None:
            return None
        return next(iter(methods.only_cards()), None)

    def _fetch(
        self,
        currency: Optional[str],
        amount: Optional[Amount],
        *,
        payment_method: Optional[str] = None,
    ) -> Optional[PaymentMethods]:
        """
        Run one provider lookup. ``None`` means there is nothing to offer,
        either because the gateway is not configured or the lookup failed.
        """
        if not self.config.is_configured():
            return None

        request = self.build_request(currency, amount)
        try:
            return self.provider.get_payment_methods(
                request.currency,
                request.amount,
                request.apple_pay_enabled,
                request.idempotency_key,
                request.buyer_external_id,
            )
        except ProviderError as exc:
            context: Dict[str, Any] = {
                "service": "Payment",
                "action": "getPaymentMethods",
            }
            if payment_method is not None:
                context["paymentMethod"] = payment_method
            context.update(
                currency=currency,
                amount=request.amount,
                code=exc.code,
            )
            self.logger.error(exc.message, extra={"context": context})
            return None
