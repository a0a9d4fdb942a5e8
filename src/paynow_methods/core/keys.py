"""
Identity helpers: deterministic keys derived from cart and customer ids.
"""

from __future__ import annotations

import hashlib
import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

__all__ = [
    "IDEMPOTENCY_KEY_MAX_LENGTH",
    "buyer_external_id",
    "cart_idempotency_key",
    "external_id_from_cart_id",
    "format_amount",
    "idempotency_key",
]

IDEMPOTENCY_KEY_MAX_LENGTH = 45

_IDEMPOTENCY_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://api.paynow.pl/idempotency")


def external_id_from_cart_id(cart_id: Union[int, str]) -> str:
    cart = str(cart_id).strip()
    if not cart:
        raise ValueError("cart_id must not be empty")
    return f"Q{cart}"


def idempotency_key(external_id: str) -> str:
    # uuid5 is stable across processes, unlike hash().
    return str(uuid.uuid5(_IDEMPOTENCY_NAMESPACE, external_id))[:IDEMPOTENCY_KEY_MAX_LENGTH]


def cart_idempotency_key(cart_id: Union[int, str]) -> str:
    """Idempotency key for every lookup made on behalf of ``cart_id``."""
    return idempotency_key(external_id_from_cart_id(cart_id))


def buyer_external_id(customer_id: Union[int, str], signature_key: str) -> str:
    return hashlib.sha256(f"{customer_id}{signature_key}".encode("utf-8")).hexdigest()


def format_amount(amount: Optional[Union[Decimal, float, int, str]]) -> Optional[int]:
    """
    Convert a major-unit amount (``12.34``) to provider minor units (``1234``).
    """
    if amount is None:
        return None
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Amount must be a decimal number, got '{amount}'") from exc
    if not value.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{amount}'")
    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
