"""
FastAPI Routers Package

All routers are included in api/index.py.
"""

from storefront.routers.cart import router as cart_router

__all__ = ["cart_router"]
