"""
HTTP client for the Paynow payment methods lookup.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .config import GatewayConfig
from .methods import PaymentMethods

__all__ = [
    "PAYMENT_METHODS_PATH",
    "PaynowClient",
    "ProviderError",
    "calculate_signature",
]

PAYMENT_METHODS_PATH = "/v3/payments/paymentmethods"


class ProviderError(Exception):
    """
    Raised for every failed provider call: HTTP errors, transport failures
    and unreadable responses.

    ``code`` is the HTTP status when the provider answered, otherwise ``None``.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.errors = list(errors or [])


def calculate_signature(
    signature_key: str,
    headers: Mapping[str, str],
    parameters: Mapping[str, Any],
    body: str = "",
) -> str:
    """
    Sign a request the way the v3 API expects: HMAC-SHA256 over a canonical
    JSON document of the signed headers, sorted query parameters and body.
    """
    document = {
        "headers": dict(headers),
        "parameters": {key: str(parameters[key]) for key in sorted(parameters)},
        "body": body,
    }
    message = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    digest = hmac.new(
        signature_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def _error_from_response(response: requests.Response) -> ProviderError:
    errors: List[Dict[str, Any]] = []
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("errors"), list):
        errors = [item for item in payload["errors"] if isinstance(item, dict)]

    if errors:
        detail = "; ".join(
            f"{item.get('errorType', 'ERROR')}: {item.get('message', '')}" for item in errors
        )
    else:
        detail = response.text
    return ProviderError(
        f"Paynow responded with {response.status_code}: {detail}",
        code=response.status_code,
        errors=errors,
    )


class PaynowClient:
    """
    Thin wrapper around the payment methods endpoint.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    @property
    def payment_methods_url(self) -> str:
        return f"{self.config.api_url}{PAYMENT_METHODS_PATH}"

    def build_parameters(
        self,
        *,
        currency: Optional[str] = None,
        amount: Optional[int] = None,
        apple_pay_enabled: bool = False,
        buyer_external_id: Optional[str] = None,
    ) -> Dict[str, str]:
        parameters: Dict[str, str] = {}
        if amount is not None:
            parameters["amount"] = str(amount)
        if currency:
            parameters["currency"] = currency
        parameters["applePayEnabled"] = "true" if apple_pay_enabled else "false"
        if buyer_external_id:
            parameters["buyerExternalId"] = buyer_external_id
        return parameters

    def build_headers(
        self,
        parameters: Mapping[str, str],
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, str]:
        signed = {"Api-Key": self.config.api_key}
        if idempotency_key:
            signed["Idempotency-Key"] = idempotency_key

        headers = dict(signed)
        headers["Signature"] = calculate_signature(
            self.config.signature_key, signed, parameters
        )
        headers["Accept"] = "application/json"
        headers["User-Agent"] = self.config.user_agent
        return headers

    def get_payment_methods(
        self,
        currency: Optional[str] = None,
        amount: Optional[int] = None,
        apple_pay_enabled: bool = False,
        idempotency_key: Optional[str] = None,
        buyer_external_id: Optional[str] = None,
    ) -> PaymentMethods:
        """
        Fetch the methods available for ``amount`` (minor units) in ``currency``.
        """
        parameters = self.build_parameters(
            currency=currency,
            amount=amount,
            apple_pay_enabled=apple_pay_enabled,
            buyer_external_id=buyer_external_id,
        )
        headers = self.build_headers(parameters, idempotency_key)
        url = self.payment_methods_url
        logging.info("Requesting payment methods from %s (currency=%s, amount=%s)", url, currency, amount)

        try:
            response = self.session.get(
                url,
                params=parameters,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ProviderError(f"Paynow request to {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise _error_from_response(response)

        try:
            return PaymentMethods.from_response(response.json())
        except ValueError as exc:
            raise ProviderError(
                f"Failed to parse payment methods from {url}: {response.text}",
                code=response.status_code,
            ) from exc
