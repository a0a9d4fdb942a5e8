from __future__ import annotations

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
import requests

from paynow_methods import (
    CheckoutContext,
    GatewayConfig,
    PaymentMethod,
    PaymentMethods,
    PaymentMethodType,
    ProviderError,
)


def make_method(method_id: Any, method_type: PaymentMethodType, *, enabled: bool = True) -> PaymentMethod:
    return PaymentMethod(
        id=str(method_id),
        name=f"Method {method_id}",
        description=f"{method_type.value} method",
        image_url=f"https://static.paynow.pl/{method_id}.png",
        enabled=enabled,
        type=method_type,
        provider_type=method_type.value,
    )


class FakeProvider:
    """Records every lookup and replays a fixed answer or error."""

    def __init__(self, methods: Optional[List[PaymentMethod]] = None, error: Optional[ProviderError] = None) -> None:
        self.methods = PaymentMethods(methods or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get_payment_methods(
        self,
        currency=None,
        amount=None,
        apple_pay_enabled=False,
        idempotency_key=None,
        buyer_external_id=None,
    ) -> PaymentMethods:
        self.calls.append(
            {
                "currency": currency,
                "amount": amount,
                "apple_pay_enabled": apple_pay_enabled,
                "idempotency_key": idempotency_key,
                "buyer_external_id": buyer_external_id,
            }
        )
        if self.error is not None:
            raise self.error
        return self.methods


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(
        api_key="api-key",
        signature_key="signature-key",
        sandbox=True,
        api_url="https://api.sandbox.paynow.pl",
        blik_active=True,
        card_active=True,
    )


@pytest.fixture
def context() -> CheckoutContext:
    return CheckoutContext(cart_id=42, customer_id=7, apple_pay_enabled=True)


@pytest.fixture
def mixed_methods() -> List[PaymentMethod]:
    return [
        make_method(1, PaymentMethodType.CARD),
        make_method(2, PaymentMethodType.BLIK),
        make_method(3, PaymentMethodType.OTHER),
    ]


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


def fake_response(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response
