"""In-memory product catalog.

The catalog owns every :class:`~pos_checkout.products.Product` and hands
out integer ids.  Carts only store those ids, so every read of a product
goes through :meth:`Catalog.get_product` and aliasing stays auditable.

``lock`` guards stock.  The checkout routine holds it for the whole
validate-then-settle window so that concurrent sessions sharing a
catalog cannot oversell a product.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from pos_checkout.products import Product

logger = logging.getLogger(__name__)


class Catalog:
    def __init__(self) -> None:
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        self.lock = threading.RLock()

    def add_product(self, product: Product) -> int:
        """Register a product and return its generated id."""
        with self.lock:
            if product.id is not None:
                raise ValueError(f"Product {product.name} is already registered under id {product.id}")
            product.id = self._next_id
            self._products[product.id] = product
            self._next_id += 1
        logger.info(
            "Product added",
            extra={"extra": {"product_id": product.id, "name": product.name, "kind": product.kind.value}},
        )
        return product.id

    def remove_product(self, product_id: int) -> None:
        """Delist a product.  Carts still holding its id fail at checkout."""
        with self.lock:
            product = self._products.pop(product_id, None)
            if product is not None:
                product.id = None

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def get_product_by_name(self, name: str) -> Optional[Product]:
        for product in self._products.values():
            if product.name == name:
                return product
        return None

    def list_products(self) -> List[Product]:
        """Return all products ordered by id."""
        return [self._products[pid] for pid in sorted(self._products)]

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)
