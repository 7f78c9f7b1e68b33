"""Shopping cart keyed by catalog product ids."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

from pos_checkout.catalog import Catalog
from pos_checkout.errors import (
    CheckoutError,
    InsufficientStockError,
    InvalidQuantityError,
    ProductNotFoundError,
)
from pos_checkout.metrics import CART_REJECTIONS_TOTAL
from pos_checkout.products import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartItem:
    """A line in the shopping cart."""
    product_id: int
    quantity: int


class Cart:
    """
    Ordered list of requested (product, quantity) pairs.  Items keep their
    insertion order, which is also the order of receipt lines.  Adding the
    same product twice yields two separate lines.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._items: List[CartItem] = []

    def add(self, product: Union[Product, int], qty: int) -> CartItem:
        """Append ``qty`` units of ``product`` to the cart.

        Args:
            product: A catalog product or its id.
            qty: Requested quantity.

        Returns:
            The new cart item.

        Raises:
            InvalidQuantityError: If ``qty`` is not positive.
            ProductNotFoundError: If the product is not in the catalog.
            InsufficientStockError: If ``qty`` plus the quantity already in the
                cart for this product exceeds its stock.
        """
        try:
            if qty <= 0:
                raise InvalidQuantityError(qty)
            given = product if isinstance(product, Product) else None
            product_id = given.id if given is not None else product
            p = self.catalog.get_product(product_id) if product_id is not None else None
            # A product object must be the catalog's own entry, not one
            # from another catalog that happens to share the id
            if p is None or (given is not None and p is not given):
                raise ProductNotFoundError(product_id, given.name if given is not None else None)
            in_cart = sum(it.quantity for it in self._items if it.product_id == p.id)
            if in_cart + qty > p.stock:
                raise InsufficientStockError(p.name, p.stock)
        except CheckoutError as ex:
            CART_REJECTIONS_TOTAL.inc(type=ex.error_type)
            logger.warning("Cart add rejected: %s", ex.message, extra={"extra": {"error_type": ex.error_type}})
            raise
        item = CartItem(product_id=p.id, quantity=qty)
        self._items.append(item)
        logger.debug("Added %d x %s to cart", qty, p.name)
        return item

    def remove(self, product_id: int) -> None:
        """Drop every line referring to ``product_id``."""
        self._items = [it for it in self._items if it.product_id != product_id]

    def clear(self) -> None:
        self._items.clear()

    def is_empty(self) -> bool:
        return not self._items

    def items(self) -> List[CartItem]:
        return list(self._items)

    def lines(self) -> List[Tuple[Product, int]]:
        """Resolve cart items against the catalog, in cart order.

        Raises:
            ProductNotFoundError: If a product has left the catalog.
        """
        resolved = []
        for it in self._items:
            p = self.catalog.get_product(it.product_id)
            if p is None:
                raise ProductNotFoundError(it.product_id)
            resolved.append((p, it.quantity))
        return resolved

    def subtotal(self) -> float:
        return sum(p.price * qty for p, qty in self.lines())

    def __len__(self) -> int:
        return len(self._items)
