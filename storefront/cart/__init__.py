"""Cart package: models, transitions, storage, and session manager."""
from .models import LineItem, CartState, make_line_item_id
from .checkout import CheckoutSummary, build_checkout_summary
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage, create_storage
from .service import CartSession, CartManager

__all__ = [
    "LineItem",
    "CartState",
    "make_line_item_id",
    "CheckoutSummary",
    "build_checkout_summary",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "create_storage",
    "CartSession",
    "CartManager",
]
