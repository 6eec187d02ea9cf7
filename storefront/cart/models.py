"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Tuple

from storefront.logging import get_logger
from storefront.services.money import to_decimal, to_float, multiply

logger = get_logger(__name__)


def make_line_item_id(product_id: str, size: str, color: str) -> str:
    """Composite line id: one row per (product, size, color)."""
    return f"{product_id}-{size}-{color}"


@dataclass(frozen=True)
class LineItem:
    """Single cart row, already resolved to a product variant."""
    id: str
    product_id: str
    name: str
    price: Decimal
    image: str
    size: str
    color: str
    quantity: int

    def __post_init__(self):
        price = to_decimal(self.price)
        if not price.is_finite():
            raise ValueError(f"Line item price must be finite, got {self.price!r}")
        object.__setattr__(self, "price", price)

    @property
    def subtotal(self) -> Decimal:
        """Price for all units of this row."""
        return multiply(self.price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to the persisted/exchanged shape."""
        return {
            "id": self.id,
            "productId": self.product_id,
            "name": self.name,
            "price": to_float(self.price),
            "image": self.image,
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from dictionary. Raises KeyError, TypeError, ValueError or ArithmeticError on malformed data."""
        return cls(
            id=str(data["id"]),
            product_id=str(data["productId"]),
            name=str(data["name"]),
            price=to_decimal(data["price"]),
            image=str(data["image"]),
            size=str(data["size"]),
            color=str(data["color"]),
            quantity=int(data["quantity"]),
        )


def calculate_totals(items: Iterable[LineItem]) -> Tuple[int, Decimal]:
    """Derived fields: (sum of quantities, sum of price * quantity)."""
    item_count = 0
    total = Decimal("0")
    for item in items:
        item_count += item.quantity
        total += item.subtotal
    return item_count, total


@dataclass(frozen=True)
class CartState:
    """
    Snapshot of a shopper's cart.

    `item_count` and `total` are always computed from `items` on
    construction; they cannot be passed in.
    """
    items: Tuple[LineItem, ...] = ()
    item_count: int = field(init=False, default=0)
    total: Decimal = field(init=False, default=Decimal("0"))

    def __post_init__(self):
        items = tuple(self.items)
        item_count, total = calculate_totals(items)
        object.__setattr__(self, "items", items)
        object.__setattr__(self, "item_count", item_count)
        object.__setattr__(self, "total", total)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: str) -> int:
        """Index of the row with `item_id`, or -1."""
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return -1

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "items": [item.to_dict() for item in self.items],
            "itemCount": self.item_count,
            "total": to_float(self.total),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        """
        Rebuild a cart from its persisted shape.

        Only `items` is read; the derived fields are recomputed and any
        stored `itemCount`/`total` are ignored. Rows sharing an id are
        merged into the first one. Accepts the `{"state": ..., "version": n}`
        envelope written by browser-side persistence.
        """
        if "state" in data and "items" not in data:
            data = data["state"]

        raw_items = data["items"]
        if not isinstance(raw_items, list):
            raise TypeError("items must be a list")

        merged: List[LineItem] = []
        positions = {}
        for raw in raw_items:
            item = LineItem.from_dict(raw)
            if item.id in positions:
                logger.warning("Merging duplicate cart row on load")
                index = positions[item.id]
                existing = merged[index]
                merged[index] = replace(existing, quantity=existing.quantity + item.quantity)
                continue
            positions[item.id] = len(merged)
            merged.append(item)

        state = cls(items=tuple(merged))

        stored_count = data.get("itemCount")
        stored_total = data.get("total")
        if stored_count != state.item_count or stored_total != to_float(state.total):
            logger.info(
                "Recomputed cart totals differ from stored values "
                f"(stored count={stored_count}, total={stored_total})"
            )
        return state
