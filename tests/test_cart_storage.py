"""
Tests for cart storage and the JSON codec
"""

import json
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from storefront.cart import CartState, MemoryCartStorage, RedisCartStorage, create_storage
from storefront.cart.storage import cart_storage_key, deserialize_cart, serialize_cart


class TestCodec:
    """Tests for serialize_cart / deserialize_cart."""

    def test_round_trip_recomputes_corrupted_totals(self, make_item):
        """Rehydrated items match; derived fields come from the items, not storage."""
        original = CartState(items=[
            make_item(product_id="a", price=19.99, quantity=2),
            make_item(product_id="b", price=5.0, quantity=1),
        ])
        data = json.loads(serialize_cart(original))
        data["itemCount"] = 42
        data["total"] = -1

        restored = deserialize_cart(json.dumps(data))

        assert restored.items == original.items
        assert restored.item_count == original.item_count == 3
        assert restored.total == original.total == Decimal("44.98")

    def test_serialized_shape(self, make_item):
        data = json.loads(serialize_cart(CartState(items=[make_item(price=10.0, quantity=3)])))

        assert set(data) == {"items", "itemCount", "total"}
        assert set(data["items"][0]) == {
            "id", "productId", "name", "price", "image", "size", "color", "quantity"
        }
        assert data["total"] == 30.0

    def test_garbage_stored_totals_ignored(self, make_item):
        data = CartState(items=[make_item(price=2.0, quantity=3)]).to_dict()
        data["itemCount"] = "many"
        data["total"] = "sNaN"

        restored = deserialize_cart(json.dumps(data))

        assert restored.item_count == 3
        assert restored.total == Decimal("6")

    def test_empty_cart_round_trip(self):
        restored = deserialize_cart(serialize_cart(CartState()))

        assert restored == CartState()

    @pytest.mark.parametrize("raw", [
        None,
        "",
        "not json",
        "[]",
        '"a string"',
        '{"itemCount": 2}',
        '{"items": [{"id": "x"}]}',
        '{"items": {"id": "x"}}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": 1, '
        '"image": "", "size": "S", "color": "c", "quantity": "lots"}]}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": 1, '
        '"image": "", "size": "S", "color": "c", "quantity": 1e999}]}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": "sNaN", '
        '"image": "", "size": "S", "color": "c", "quantity": 1}]}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": "NaN", '
        '"image": "", "size": "S", "color": "c", "quantity": 1}]}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": "Infinity", '
        '"image": "", "size": "S", "color": "c", "quantity": 1}]}',
        '{"items": [{"id": "x", "productId": "p", "name": "n", "price": -Infinity, '
        '"image": "", "size": "S", "color": "c", "quantity": 1}]}',
    ])
    def test_unreadable_values_yield_none(self, raw):
        """Absent or corrupt data is treated as no prior cart."""
        assert deserialize_cart(raw) is None


class TestMemoryCartStorage:

    @pytest.mark.asyncio
    async def test_save_load_delete(self):
        storage = MemoryCartStorage()

        assert await storage.load("k") is None
        assert await storage.save("k", "v") is True
        assert await storage.load("k") == "v"
        assert await storage.delete("k") is True
        assert await storage.delete("k") is False


class TestRedisCartStorage:

    @pytest.mark.asyncio
    async def test_save_sets_ttl(self):
        redis = AsyncMock()
        redis.set = AsyncMock(return_value=True)
        storage = RedisCartStorage(redis=redis, ttl=60)

        assert await storage.save("cart-storage:abc", "{}") is True
        redis.set.assert_awaited_once_with("cart-storage:abc", "{}", ex=60)

    @pytest.mark.asyncio
    async def test_load(self):
        redis = AsyncMock()
        redis.get = AsyncMock(side_effect=[None, b'{"items": []}', '{"items": []}'])
        storage = RedisCartStorage(redis=redis)

        assert await storage.load("k") is None
        assert await storage.load("k") == '{"items": []}'
        assert await storage.load("k") == '{"items": []}'

    @pytest.mark.asyncio
    async def test_delete(self):
        redis = AsyncMock()
        redis.delete = AsyncMock(return_value=1)
        storage = RedisCartStorage(redis=redis)

        assert await storage.delete("k") is True

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        """Backend errors are left to the cart session to handle."""
        redis = AsyncMock()
        redis.get = AsyncMock(side_effect=ConnectionError("down"))
        storage = RedisCartStorage(redis=redis)

        with pytest.raises(ConnectionError):
            await storage.load("k")


def test_cart_storage_key():
    assert cart_storage_key("abc123") == "cart-storage:abc123"


def test_create_storage():
    assert isinstance(create_storage("memory"), MemoryCartStorage)
    assert isinstance(create_storage("redis"), RedisCartStorage)
    with pytest.raises(ValueError):
        create_storage("sqlite")
