"""
Storefront Core Module

This package contains the cart service components:
- config: Environment configuration
- db: Redis client and key layout
- cart: Cart aggregate, transitions, storage and session manager
- services: Money helpers
- routers: FastAPI cart endpoints

Note: Imports are lazy so that importing a submodule does not pull in
the Redis client or FastAPI.
"""

__all__ = [
    "get_redis",
    "CartManager",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "get_redis":
        from storefront.db import get_redis
        return get_redis
    elif name == "CartManager":
        from storefront.cart import CartManager
        return CartManager
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
