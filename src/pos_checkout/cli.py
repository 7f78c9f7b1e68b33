"""
Command-line interface for the checkout counter.

``interactive_cli`` wires a catalog, a cart and a customer into a menu
loop that reads from ``input()`` and prints results.  ``run_demo`` runs
a fixed purchase non-interactively.  The business logic lives in the
other modules; this one only does console I/O.
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, UTC
from typing import List, Optional

from pos_checkout import products
from pos_checkout.cart import Cart
from pos_checkout.catalog import Catalog
from pos_checkout.checkout import CheckoutService
from pos_checkout.config import Settings, load_settings
from pos_checkout.customer import Customer
from pos_checkout.errors import CheckoutError
from pos_checkout.logging_config import configure_logging
from pos_checkout.metrics import generate_metrics_text


def seed_demo_catalog(catalog: Catalog, now: datetime | None = None) -> Catalog:
    """Stock one product of every kind."""
    now = now or datetime.now(UTC)
    catalog.add_product(products.cheese("Cheese", 100, 10, now + timedelta(days=7), 0.2))
    catalog.add_product(products.biscuits("Biscuits", 150, 5, now + timedelta(days=30), 0.7))
    catalog.add_product(products.tv("TV", 500, 3, 5.0))
    catalog.add_product(products.mobile_scratch_card("ScratchCard", 50, 20))
    return catalog


def run_demo(settings: Settings) -> bool:
    """Buy two cheeses, one box of biscuits and a scratch card."""
    catalog = seed_demo_catalog(Catalog())
    customer = Customer(settings.customer_name, settings.customer_balance)
    cart = Cart(catalog)
    cart.add(catalog.get_product_by_name("Cheese"), 2)
    cart.add(catalog.get_product_by_name("Biscuits"), 1)
    cart.add(catalog.get_product_by_name("ScratchCard"), 1)
    result = CheckoutService(catalog, shipping_fee=settings.shipping_fee).checkout(customer, cart)
    return result.ok


def interactive_cli(settings: Settings) -> None:
    """Provide a simple command-line interface to the checkout counter."""
    catalog = seed_demo_catalog(Catalog())
    customer = Customer(settings.customer_name, settings.customer_balance)
    cart = Cart(catalog)
    service = CheckoutService(catalog, shipping_fee=settings.shipping_fee)

    def print_menu() -> None:
        print("\n-- Checkout Counter --")
        print("1. List Products")
        print("2. Add Product to Cart")
        print("3. View Cart")
        print("4. Checkout")
        print("5. Clear Cart")
        print("6. Show Balance")
        print("7. Show Metrics")
        print("0. Exit")

    while True:
        print_menu()
        choice = input("Select an option: ").strip()
        if choice == "1":
            print("\nAvailable Products:")
            for p in catalog.list_products():
                flags = []
                if p.expiry:
                    flags.append("expired" if p.is_expired() else f"expires {p.expiry.expires_at:%Y-%m-%d}")
                if p.requires_shipping:
                    flags.append(f"ships, {p.weight}kg")
                suffix = f" [{', '.join(flags)}]" if flags else ""
                print(f"{p.id}. {p.name} - {p.price:.2f} (Stock: {p.stock}){suffix}")
        elif choice == "2":
            try:
                pid = int(input("Enter Product ID: "))
                qty = int(input("Enter quantity: "))
            except ValueError:
                print("Please enter valid numeric values.")
                continue
            try:
                cart.add(pid, qty)
            except CheckoutError as ex:
                print(f"Error: {ex.message}")
                continue
            print(f"Added {qty} x {catalog.get_product(pid).name} to cart")
        elif choice == "3":
            if cart.is_empty():
                print("Cart is empty.")
                continue
            print("\nCart Contents:")
            try:
                lines = cart.lines()
            except CheckoutError as ex:
                print(f"Error: {ex.message}")
                continue
            for product, qty in lines:
                print(f"{product.name} x {qty} = {product.price * qty:.2f}")
            print(f"Subtotal: {sum(p.price * q for p, q in lines):.2f}")
        elif choice == "4":
            result = service.checkout(customer, cart)
            if result.ok:
                cart.clear()
        elif choice == "5":
            cart.clear()
            print("Cart cleared.")
        elif choice == "6":
            print(f"{customer.name}: balance {customer.balance:.2f}")
        elif choice == "7":
            print(generate_metrics_text().decode("utf-8"))
        elif choice == "0":
            print("Exiting application.")
            break
        else:
            print("Invalid option. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    configure_logging(settings.log_dir, settings.log_level, console=False)
    if argv and argv[0] == "demo":
        return 0 if run_demo(settings) else 1
    if argv:
        print(f"Unknown command: {argv[0]} (expected 'demo' or no arguments)", file=sys.stderr)
        return 2
    try:
        interactive_cli(settings)
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted by user. Exiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
