# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.is_dir() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
# --- end path/bootstrap ---

import unittest
from datetime import datetime, timedelta, UTC

from pos_checkout import products
from pos_checkout.cart import Cart
from pos_checkout.catalog import Catalog
from pos_checkout.errors import InsufficientStockError, InvalidQuantityError, ProductNotFoundError
from pos_checkout.metrics import CART_REJECTIONS_TOTAL
from pos_checkout.products import ProductKind

NOW = datetime(2026, 1, 1, tzinfo=UTC)


class TestProducts(unittest.TestCase):

    def test_expiry_is_strictly_after(self):
        cheese = products.cheese("Cheese", 100, 1, NOW, 0.2)
        self.assertFalse(cheese.is_expired(NOW - timedelta(seconds=1)))
        self.assertFalse(cheese.is_expired(NOW))
        self.assertTrue(cheese.is_expired(NOW + timedelta(microseconds=1)))

    def test_expiry_is_monotonic(self):
        cheese = products.cheese("Cheese", 100, 1, NOW, 0.2)
        instants = [NOW + timedelta(hours=h) for h in range(-3, 4)]
        flags = [cheese.is_expired(t) for t in instants]
        self.assertEqual(flags, sorted(flags))

    def test_naive_expiry_is_treated_as_utc(self):
        cheese = products.cheese("Cheese", 100, 1, datetime(2026, 1, 1), 0.2)
        self.assertTrue(cheese.is_expired(NOW + timedelta(minutes=1)))

    def test_capabilities_per_kind(self):
        cheese = products.cheese("Cheese", 100, 1, NOW, 0.2)
        biscuits = products.biscuits("Biscuits", 150, 1, NOW, 0.7)
        tv = products.tv("TV", 500, 1, 5.0)
        card = products.mobile_scratch_card("Card", 50, 1)

        self.assertEqual(
            [p.kind for p in (cheese, biscuits, tv, card)],
            [ProductKind.CHEESE, ProductKind.BISCUITS, ProductKind.TV, ProductKind.MOBILE_SCRATCH_CARD],
        )
        self.assertEqual([p.requires_shipping for p in (cheese, biscuits, tv, card)], [True, True, True, False])
        self.assertEqual([p.weight for p in (cheese, biscuits, tv, card)], [0.2, 0.7, 5.0, None])
        # Non-expirable kinds never expire
        far_future = NOW + timedelta(days=365 * 50)
        self.assertFalse(tv.is_expired(far_future))
        self.assertFalse(card.is_expired(far_future))
        self.assertTrue(biscuits.is_expired(far_future))

    def test_reduce_quantity(self):
        tv = products.tv("TV", 500, 3, 5.0)
        tv.reduce_quantity(2)
        self.assertEqual(tv.stock, 1)

    def test_construction_validation(self):
        with self.assertRaises(ValueError):
            products.tv("TV", -1, 3, 5.0)
        with self.assertRaises(ValueError):
            products.mobile_scratch_card("Card", 10, -1)
        with self.assertRaises(ValueError):
            products.tv("TV", 500, 3, 0)


class TestCatalog(unittest.TestCase):

    def test_ids_are_assigned_in_order(self):
        catalog = Catalog()
        a = catalog.add_product(products.mobile_scratch_card("A", 1, 1))
        b = catalog.add_product(products.mobile_scratch_card("B", 1, 1))
        self.assertEqual((a, b), (1, 2))
        self.assertEqual([p.name for p in catalog.list_products()], ["A", "B"])
        self.assertEqual(catalog.get_product_by_name("B").id, b)
        self.assertIsNone(catalog.get_product(99))

    def test_same_product_cannot_be_added_twice(self):
        catalog = Catalog()
        card = products.mobile_scratch_card("A", 1, 1)
        catalog.add_product(card)
        with self.assertRaises(ValueError):
            catalog.add_product(card)

    def test_product_from_another_catalog_is_rejected(self):
        first = Catalog()
        second = Catalog()
        second.add_product(products.mobile_scratch_card("Other", 1, 1))
        card = products.mobile_scratch_card("A", 1, 1)
        first.add_product(card)
        with self.assertRaises(ValueError):
            second.add_product(card)
        self.assertEqual(card.id, 1)
        self.assertIs(first.get_product(1), card)
        self.assertEqual(len(second), 1)

    def test_removed_product_can_be_listed_again(self):
        catalog = Catalog()
        card = products.mobile_scratch_card("A", 1, 1)
        old_id = catalog.add_product(card)
        catalog.remove_product(old_id)
        self.assertIsNone(card.id)
        self.assertNotEqual(catalog.add_product(card), old_id)

    def test_remove_product(self):
        catalog = Catalog()
        pid = catalog.add_product(products.mobile_scratch_card("A", 1, 1))
        catalog.remove_product(pid)
        self.assertNotIn(pid, catalog)
        self.assertEqual(len(catalog), 0)


class TestCart(unittest.TestCase):

    def setUp(self):
        self.catalog = Catalog()
        self.tv = products.tv("TV", 500, 3, 5.0)
        self.card = products.mobile_scratch_card("Card", 50, 10)
        self.catalog.add_product(self.tv)
        self.catalog.add_product(self.card)
        self.cart = Cart(self.catalog)

    def test_add_preserves_order(self):
        self.assertTrue(self.cart.is_empty())
        self.cart.add(self.card, 2)
        self.cart.add(self.tv.id, 1)
        self.cart.add(self.card, 1)
        self.assertFalse(self.cart.is_empty())
        self.assertEqual(
            [(it.product_id, it.quantity) for it in self.cart.items()],
            [(self.card.id, 2), (self.tv.id, 1), (self.card.id, 1)],
        )
        self.assertEqual(self.cart.subtotal(), 3 * 50 + 500)

    def test_add_rejects_quantity_over_stock(self):
        self.cart.add(self.card, 1)
        rejections = CART_REJECTIONS_TOTAL.get(type="stock_insufficient")
        with self.assertRaises(InsufficientStockError) as ctx:
            self.cart.add(self.tv, 4)
        self.assertIn("TV", str(ctx.exception))
        self.assertEqual(ctx.exception.available, 3)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(CART_REJECTIONS_TOTAL.get(type="stock_insufficient"), rejections + 1)

    def test_add_accepts_exact_stock(self):
        self.cart.add(self.tv, 3)
        self.assertEqual(len(self.cart), 1)

    def test_add_validation(self):
        with self.assertRaises(InvalidQuantityError):
            self.cart.add(self.tv, 0)
        with self.assertRaises(ProductNotFoundError):
            self.cart.add(999, 1)
        with self.assertRaises(ProductNotFoundError) as ctx:
            self.cart.add(products.tv("Unlisted", 1, 1, 1.0), 1)
        self.assertEqual(str(ctx.exception), "Product Unlisted not found.")
        self.assertTrue(self.cart.is_empty())

    def test_add_rejects_product_from_another_catalog(self):
        other = Catalog()
        foreign_tv = products.tv("Foreign TV", 900, 5, 8.0)
        other.add_product(foreign_tv)
        # Same id as self.tv in this catalog, but a different product
        self.assertEqual(foreign_tv.id, self.tv.id)
        with self.assertRaises(ProductNotFoundError) as ctx:
            self.cart.add(foreign_tv, 1)
        self.assertIn("Foreign TV", str(ctx.exception))
        self.assertTrue(self.cart.is_empty())

    def test_add_counts_quantity_already_in_cart(self):
        self.cart.add(self.tv, 2)
        with self.assertRaises(InsufficientStockError):
            self.cart.add(self.tv, 2)
        self.cart.add(self.tv, 1)
        self.assertEqual([it.quantity for it in self.cart.items()], [2, 1])

    def test_cart_sees_live_stock(self):
        self.cart.add(self.tv, 2)
        self.tv.reduce_quantity(2)
        with self.assertRaises(InsufficientStockError):
            self.cart.add(self.tv, 2)

    def test_lines_remove_and_clear(self):
        self.cart.add(self.tv, 1)
        self.cart.add(self.card, 2)
        self.assertEqual(self.cart.lines(), [(self.tv, 1), (self.card, 2)])
        self.cart.remove(self.tv.id)
        self.assertEqual(self.cart.lines(), [(self.card, 2)])
        self.cart.clear()
        self.assertTrue(self.cart.is_empty())


if __name__ == "__main__":
    unittest.main(verbosity=2)
