"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock

# Set test environment variables
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("CART_CURRENCY", "NGN")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from storefront.cart import LineItem, MemoryCartStorage, make_line_item_id  # noqa: E402


@pytest.fixture
def make_item():
    """Factory for line items with sensible defaults"""
    def _make(product_id="prod-1", size="M", color="black", price=10.0, quantity=1, **overrides):
        data = {
            "id": make_line_item_id(product_id, size, color),
            "product_id": product_id,
            "name": f"Product {product_id}",
            "price": price,
            "image": f"https://cdn.test/{product_id}.jpg",
            "size": size,
            "color": color,
            "quantity": quantity,
        }
        data.update(overrides)
        return LineItem(**data)
    return _make


@pytest.fixture
def memory_storage():
    """Empty in-memory cart storage"""
    return MemoryCartStorage()


@pytest.fixture
def failing_storage():
    """Storage whose every call raises"""
    storage = AsyncMock()
    storage.load = AsyncMock(side_effect=ConnectionError("redis down"))
    storage.save = AsyncMock(side_effect=ConnectionError("redis down"))
    storage.delete = AsyncMock(side_effect=ConnectionError("redis down"))
    return storage
