"""Error kinds raised by cart operations and the checkout routine.

Each error carries an ``error_type`` code that is used as the metrics
label and in structured log records.  The checkout routine converts
them into a failed :class:`~pos_checkout.checkout.CheckoutResult`, so
only cart operations let them reach the caller.
"""

from __future__ import annotations


class CheckoutError(Exception):
    """Base class for recoverable cart/checkout failures."""

    error_type = "checkout_error"

    def __init__(self, message: str, product_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.product_name = product_name


class EmptyCartError(CheckoutError):
    error_type = "empty_cart"

    def __init__(self) -> None:
        super().__init__("Cart is empty.")


class ExpiredProductError(CheckoutError):
    error_type = "expired_product"

    def __init__(self, product_name: str) -> None:
        super().__init__(f"Product {product_name} is expired.", product_name)


class InsufficientStockError(CheckoutError, ValueError):
    """Requested quantity exceeds the product's current stock."""

    error_type = "stock_insufficient"

    def __init__(self, product_name: str, available: int) -> None:
        super().__init__(
            f"Not enough quantity for {product_name} (only {available} in stock)",
            product_name,
        )
        self.available = available


class InsufficientBalanceError(CheckoutError):
    error_type = "balance_insufficient"

    def __init__(self, balance: float, total: float) -> None:
        super().__init__("Insufficient balance.")
        self.balance = balance
        self.total = total


class InvalidQuantityError(CheckoutError, ValueError):
    error_type = "invalid_quantity"

    def __init__(self, quantity: int) -> None:
        super().__init__("Quantity must be positive.")
        self.quantity = quantity


class ProductNotFoundError(CheckoutError, LookupError):
    error_type = "product_missing"

    def __init__(self, product_id: int | None, product_name: str | None = None) -> None:
        super().__init__(f"Product {product_name or product_id} not found.", product_name)
        self.product_id = product_id
