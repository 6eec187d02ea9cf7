"""Checkout summary built from a cart."""
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from storefront.errors import EmptyCartError, ERROR_INVALID_SHIPPING_FEE
from storefront.services.money import add, to_decimal, to_float, to_minor_units
from .models import CartState


@dataclass(frozen=True)
class CheckoutSummary:
    """What the payment step needs from the cart."""
    items: List[dict]
    subtotal: Decimal
    shipping_fee: Decimal
    total_amount: Decimal

    @property
    def amount_minor(self) -> int:
        """Total in minor units (kobo/cents)."""
        return to_minor_units(self.total_amount)

    def to_dict(self) -> dict:
        return {
            "items": self.items,
            "subtotal": to_float(self.subtotal),
            "shippingFee": to_float(self.shipping_fee),
            "totalAmount": to_float(self.total_amount),
            "amountMinor": self.amount_minor,
        }


def build_checkout_summary(state: CartState, shipping_fee=0) -> CheckoutSummary:
    """
    Summarize a cart for checkout.

    Raises:
        EmptyCartError: cart has no items
        ValueError: negative or non-finite shipping fee
    """
    if state.is_empty:
        raise EmptyCartError()

    fee = to_decimal(shipping_fee)
    if not fee.is_finite() or fee < 0:
        raise ValueError(ERROR_INVALID_SHIPPING_FEE)

    items = [
        {
            "productId": item.id,
            "productName": item.name,
            "productImage": item.image,
            "quantity": item.quantity,
            "price": to_float(item.price),
            "size": item.size,
            "color": item.color,
            "subtotal": to_float(item.subtotal),
        }
        for item in state.items
    ]

    return CheckoutSummary(
        items=items,
        subtotal=state.total,
        shipping_fee=fee,
        total_amount=add(state.total, fee),
    )
