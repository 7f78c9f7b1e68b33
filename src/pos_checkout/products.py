"""Product variants sold at the checkout.

A product is a single dataclass tagged with a :class:`ProductKind`.  The
two capabilities a product may carry are optional records rather than
base classes:

* :class:`ExpiryInfo` - the product stops being sellable once the
  current time is strictly after ``expires_at``.
* :class:`ShippingInfo` - the product ships physically and has a unit
  weight in kilograms.

The constructor helpers at the bottom of the module attach the records
each kind needs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Optional


class ProductKind(enum.Enum):
    CHEESE = "cheese"
    BISCUITS = "biscuits"
    TV = "tv"
    MOBILE_SCRATCH_CARD = "mobile_scratch_card"


@dataclass(frozen=True)
class ExpiryInfo:
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        # Naive timestamps are taken to be UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now > expires_at


@dataclass(frozen=True)
class ShippingInfo:
    weight: float  # kg per unit


@dataclass
class Product:
    """A catalog entry.  ``id`` is assigned by the catalog on insertion."""

    name: str
    price: float
    stock: int
    kind: ProductKind
    expiry: Optional[ExpiryInfo] = None
    shipping: Optional[ShippingInfo] = None
    id: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Price must not be negative (got {self.price})")
        if self.stock < 0:
            raise ValueError(f"Stock must not be negative (got {self.stock})")
        if self.shipping is not None and self.shipping.weight <= 0:
            raise ValueError(f"Weight must be positive (got {self.shipping.weight})")

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expiry is None:
            return False
        return self.expiry.is_expired(now)

    @property
    def requires_shipping(self) -> bool:
        return self.shipping is not None

    @property
    def weight(self) -> float | None:
        return self.shipping.weight if self.shipping else None

    def reduce_quantity(self, qty: int) -> None:
        # Callers validate qty against stock first
        self.stock -= qty


def cheese(name: str, price: float, quantity: int, expires_at: datetime, weight: float) -> Product:
    return Product(
        name=name,
        price=price,
        stock=quantity,
        kind=ProductKind.CHEESE,
        expiry=ExpiryInfo(expires_at),
        shipping=ShippingInfo(weight),
    )


def biscuits(name: str, price: float, quantity: int, expires_at: datetime, weight: float) -> Product:
    """Biscuits behave exactly like cheese; only the kind tag differs."""
    product = cheese(name, price, quantity, expires_at, weight)
    product.kind = ProductKind.BISCUITS
    return product


def tv(name: str, price: float, quantity: int, weight: float) -> Product:
    return Product(
        name=name,
        price=price,
        stock=quantity,
        kind=ProductKind.TV,
        shipping=ShippingInfo(weight),
    )


def mobile_scratch_card(name: str, price: float, quantity: int) -> Product:
    return Product(name=name, price=price, stock=quantity, kind=ProductKind.MOBILE_SCRATCH_CARD)
