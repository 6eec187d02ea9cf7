"""
Common Error Constants and cart exceptions.

Centralized error messages shared by the cart service and its HTTP layer.
"""

# Session errors
ERROR_SESSION_REQUIRED = "X-Cart-Session header is required"

# Cart errors
ERROR_CART_EMPTY = "Cart is empty"
ERROR_INVALID_SHIPPING_FEE = "Shipping fee must be a finite, non-negative amount"

# Generic errors
ERROR_INTERNAL = "Internal server error"


class CartError(Exception):
    """Base class for cart domain errors."""


class EmptyCartError(CartError):
    """Raised when an operation needs at least one line item."""

    def __init__(self, message: str = ERROR_CART_EMPTY):
        super().__init__(message)
