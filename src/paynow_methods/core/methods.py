"""
Value types for the payment methods returned by the Paynow lookup.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

__all__ = [
    "PaymentMethod",
    "PaymentMethodType",
    "PaymentMethods",
]


class PaymentMethodType(str, enum.Enum):
    CARD = "CARD"
    BLIK = "BLIK"
    OTHER = "OTHER"

    @classmethod
    def from_provider(cls, value: Any) -> "PaymentMethodType":
        """Collapse the provider's type vocabulary (PBL, GOOGLE_PAY, ...) onto ours."""
        normalized = str(value or "").upper()
        if normalized == cls.CARD.value:
            return cls.CARD
        if normalized == cls.BLIK.value:
            return cls.BLIK
        return cls.OTHER


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    name: str
    description: str
    image_url: str
    enabled: bool
    type: PaymentMethodType
    provider_type: str = ""

    @classmethod
    def from_response(cls, item: Mapping[str, Any]) -> "PaymentMethod":
        raw_type = str(item.get("type") or "")
        return cls(
            id=str(item.get("id") or ""),
            name=str(item.get("name") or ""),
            description=str(item.get("description") or ""),
            image_url=str(item.get("image") or ""),
            enabled=str(item.get("status") or "").upper() == "ENABLED",
            type=PaymentMethodType.from_provider(raw_type),
            provider_type=raw_type,
        )

    def to_payload(self) -> Dict[str, Any]:
        """
        Render the method for checkout consumers.

        The type drives filtering only and is deliberately left out.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image_url,
            "enabled": self.enabled,
        }


class PaymentMethods:
    """
    Ordered, read-only set of methods from a single provider lookup.
    """

    __slots__ = ("_methods",)

    def __init__(self, methods: Iterable[PaymentMethod] = ()) -> None:
        self._methods: Tuple[PaymentMethod, ...] = tuple(methods)

    @classmethod
    def from_response(cls, payload: Any) -> "PaymentMethods":
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of payment methods, got {type(payload).__name__}")
        if not all(isinstance(item, Mapping) for item in payload):
            raise ValueError("Every payment method entry must be an object")
        return cls(PaymentMethod.from_response(item) for item in payload)

    def all(self) -> List[PaymentMethod]:
        return list(self._methods)

    def only_blik(self) -> List[PaymentMethod]:
        return self._of_type(PaymentMethodType.BLIK)

    def only_cards(self) -> List[PaymentMethod]:
        return self._of_type(PaymentMethodType.CARD)

    def _of_type(self, method_type: PaymentMethodType) -> List[PaymentMethod]:
        return [method for method in self._methods if method.type is method_type]

    def __iter__(self) -> Iterator[PaymentMethod]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __repr__(self) -> str:
        return f"PaymentMethods({list(self._methods)!r})"
