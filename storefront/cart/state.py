"""
Cart state transitions.

Pure functions: each takes a CartState and returns a new one without
touching the input. Persistence is the caller's job.
"""
from dataclasses import replace

from storefront.logging import get_logger, sanitize_string_for_logging
from .models import CartState, LineItem

logger = get_logger(__name__)

EMPTY_CART = CartState()


def add_item(state: CartState, item: LineItem) -> CartState:
    """
    Add a line, merging into an existing row with the same id.

    A merge only increments quantity; name, price and image of the row
    already in the cart are kept. Quantity is not validated here.
    """
    if item.quantity < 1:
        logger.warning(
            f"Adding non-positive quantity {item.quantity} for {sanitize_string_for_logging(item.id)}"
        )

    index = state.find(item.id)
    if index == -1:
        return CartState(items=state.items + (item,))

    items = list(state.items)
    existing = items[index]
    items[index] = replace(existing, quantity=existing.quantity + item.quantity)
    return CartState(items=tuple(items))


def remove_item(state: CartState, item_id: str) -> CartState:
    """Drop the row with `item_id`. Unknown ids leave the state as is."""
    if state.find(item_id) == -1:
        return state
    return CartState(items=tuple(item for item in state.items if item.id != item_id))


def update_item_quantity(state: CartState, item_id: str, quantity: int) -> CartState:
    """Set a row's quantity. Anything below 1 removes the row."""
    if quantity < 1:
        return remove_item(state, item_id)

    index = state.find(item_id)
    if index == -1:
        return state

    items = list(state.items)
    items[index] = replace(items[index], quantity=quantity)
    return CartState(items=tuple(items))


def clear_cart(state: CartState) -> CartState:
    return EMPTY_CART
