"""Checkout: validate the cart, settle payment from the customer's balance,
then print the shipment notice and the receipt.

The routine is all-or-nothing.  Every check runs before any stock or
balance is touched, and both the checks and the settlement happen while
holding the catalog lock.  Failures are reported as a single ``Error:``
line on the error stream and as a failed :class:`CheckoutResult`; no
exception escapes :meth:`CheckoutService.checkout`.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Callable, Dict, List, TextIO, Tuple

from pos_checkout.cart import Cart
from pos_checkout.catalog import Catalog
from pos_checkout.config import DEFAULT_SHIPPING_FEE
from pos_checkout.customer import Customer
from pos_checkout.errors import (
    CheckoutError,
    EmptyCartError,
    ExpiredProductError,
    InsufficientBalanceError,
    InsufficientStockError,
    ProductNotFoundError,
)
from pos_checkout.metrics import CHECKOUT_DURATION_SECONDS, CHECKOUT_ERROR_TOTAL, ITEMS_SOLD_TOTAL
from pos_checkout.products import Product
from pos_checkout.shipping import NAME_WIDTH, ManifestEntry, ShippingService, format_amount

logger = logging.getLogger(__name__)

RECEIPT_SEPARATOR = "-" * 22


@dataclass
class CheckoutResult:
    ok: bool
    message: str
    error_type: str | None = None
    subtotal: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    balance_left: float | None = None
    shipment_notice: List[str] = field(default_factory=list)
    receipt: List[str] = field(default_factory=list)


def format_receipt(
    lines: List[Tuple[Product, int]],
    subtotal: float,
    shipping: float,
    total: float,
    balance_left: float,
) -> List[str]:
    receipt = ["** Checkout receipt **"]
    for product, qty in lines:
        receipt.append(f"{qty}x {product.name:<{NAME_WIDTH}} {format_amount(product.price * qty)}")
    receipt.append(RECEIPT_SEPARATOR)
    receipt.append(f"Subtotal         {format_amount(subtotal)}")
    receipt.append(f"Shipping         {format_amount(shipping)}")
    receipt.append(f"Amount           {format_amount(total)}")
    receipt.append(f"Balance left     {format_amount(balance_left)}")
    return receipt


class CheckoutService:
    """
    Runs checkouts against one catalog.  Output streams default to
    ``sys.stdout``/``sys.stderr`` resolved at call time; ``clock`` supplies
    the instant used for expiry checks.
    """

    def __init__(
        self,
        catalog: Catalog,
        shipping_fee: float = DEFAULT_SHIPPING_FEE,
        shipping_service: ShippingService | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog
        self.shipping_fee = shipping_fee
        self.out = out
        self.err = err
        self.shipping_service = shipping_service or ShippingService(out)
        self.clock = clock or (lambda: datetime.now(UTC))

    def _validate(
        self, cart: Cart, now: datetime
    ) -> Tuple[List[Tuple[Product, int]], float, List[ManifestEntry]]:
        """Check every cart item in order and fail on the first violation.

        Returns:
            The resolved cart lines, the subtotal and the shipping manifest.
        """
        if cart.is_empty():
            raise EmptyCartError()
        lines: List[Tuple[Product, int]] = []
        manifest: List[ManifestEntry] = []
        subtotal = 0.0
        requested: Dict[int, int] = {}
        for item in cart.items():
            product = self.catalog.get_product(item.product_id)
            if product is None:
                raise ProductNotFoundError(item.product_id)
            if product.is_expired(now):
                raise ExpiredProductError(product.name)
            # Stock may have moved since the item was added, and one product
            # may span several cart lines
            requested[product.id] = requested.get(product.id, 0) + item.quantity
            if requested[product.id] > product.stock:
                raise InsufficientStockError(product.name, product.stock)
            subtotal += product.price * item.quantity
            if product.requires_shipping:
                manifest.append(ManifestEntry(product, item.quantity))
            lines.append((product, item.quantity))
        return lines, subtotal, manifest

    def checkout(self, customer: Customer, cart: Cart) -> CheckoutResult:
        """Validate, settle and report a purchase.

        On success each product's stock drops by its cart quantity and the
        customer's balance drops by subtotal plus shipping.  On failure
        nothing is mutated.  The cart itself is left as it was either way.
        """
        start_time = time.perf_counter()
        error_type: str | None = None
        try:
            with self.catalog.lock:
                try:
                    lines, subtotal, manifest = self._validate(cart, self.clock())
                    shipping = self.shipping_fee if manifest else 0.0
                    total = subtotal + shipping
                    if customer.balance < total:
                        raise InsufficientBalanceError(customer.balance, total)
                except CheckoutError as ex:
                    error_type = ex.error_type
                    print(f"Error: {ex.message}", file=self.err or sys.stderr)
                    logger.warning(
                        "Checkout rejected: %s",
                        ex.message,
                        extra={"extra": {"customer": customer.name, "error_type": error_type}},
                    )
                    return CheckoutResult(ok=False, message=ex.message, error_type=error_type)

                # Settlement
                for product, qty in lines:
                    product.reduce_quantity(qty)
                customer.deduct(total)

            for product, qty in lines:
                ITEMS_SOLD_TOTAL.inc(qty, kind=product.kind.value)

            notice: List[str] = []
            if manifest:
                notice = self.shipping_service.ship(manifest)
            receipt = format_receipt(lines, subtotal, shipping, total, customer.balance)
            out = self.out or sys.stdout
            for line in receipt:
                print(line, file=out)

            logger.info(
                "Checkout completed",
                extra={
                    "extra": {
                        "customer": customer.name,
                        "items": len(lines),
                        "subtotal": subtotal,
                        "shipping": shipping,
                        "total": total,
                        "balance_left": customer.balance,
                    }
                },
            )
            return CheckoutResult(
                ok=True,
                message="Checkout completed.",
                subtotal=subtotal,
                shipping=shipping,
                total=total,
                balance_left=customer.balance,
                shipment_notice=notice,
                receipt=receipt,
            )
        finally:
            duration = time.perf_counter() - start_time
            CHECKOUT_DURATION_SECONDS.observe(duration, outcome="error" if error_type else "success")
            if error_type:
                CHECKOUT_ERROR_TOTAL.inc(type=error_type)


def checkout(customer: Customer, cart: Cart, shipping_fee: float = DEFAULT_SHIPPING_FEE) -> CheckoutResult:
    """Check out ``cart`` against the catalog it was filled from."""
    return CheckoutService(cart.catalog, shipping_fee=shipping_fee).checkout(customer, cart)
