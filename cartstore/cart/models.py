"""Cart models: catalog product, cart entry, and snapshot helpers."""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Tuple, Union

from cartstore.money import multiply, round_money


@dataclass(frozen=True)
class CartProduct:
    """Product as handed over by the catalog screen (no quantity yet)."""
    id: str
    title: str
    image_url: str
    price: Union[int, float]

    @classmethod
    def from_dict(cls, data: dict) -> "CartProduct":
        """Create from a catalog payload."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            image_url=data["image_url"],
            price=data["price"],
        )


@dataclass(frozen=True)
class CartEntry:
    """Single line in the cart. Quantity is at least 1 while present."""
    id: str
    title: str
    image_url: str
    price: Union[int, float]
    quantity: int = 1

    @classmethod
    def from_product(cls, product: CartProduct) -> "CartEntry":
        """First line for a product that is not in the cart yet."""
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            price=product.price,
            quantity=1,
        )

    def with_quantity(self, quantity: int) -> "CartEntry":
        return replace(self, quantity=quantity)

    @property
    def total_price(self) -> Decimal:
        """Price for all units."""
        return round_money(multiply(self.price, self.quantity))

    def to_dict(self) -> dict:
        """Convert to the persisted wire shape."""
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "price": self.price,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartEntry":
        """Create from the persisted wire shape."""
        quantity = data["quantity"]
        # bool is an int subclass; floats like 1.9 must not be truncated
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"quantity must be an integer, got {quantity!r}")
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        return cls(
            id=str(data["id"]),
            title=data["title"],
            image_url=data["image_url"],
            price=data["price"],
            quantity=quantity,
        )


# Immutable, ordered, unique by id
Snapshot = Tuple[CartEntry, ...]

EMPTY_SNAPSHOT: Snapshot = ()


def snapshot_to_list(snapshot: Snapshot) -> list[dict]:
    return [entry.to_dict() for entry in snapshot]


def snapshot_from_list(data: list) -> Snapshot:
    """
    Build a snapshot from a decoded JSON array.

    Raises:
        TypeError: data is not a list of objects, or a quantity is not an integer
        KeyError: an entry misses a field
        ValueError: bad quantity or duplicate id
    """
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array, got {type(data).__name__}")

    entries = tuple(CartEntry.from_dict(item) for item in data)
    ids = [entry.id for entry in entries]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate product id in cart")
    return entries


def total_items(snapshot: Snapshot) -> int:
    """Total number of units in the cart."""
    return sum(entry.quantity for entry in snapshot)


def subtotal(snapshot: Snapshot) -> Decimal:
    """Sum of line totals."""
    return round_money(sum((entry.total_price for entry in snapshot), Decimal("0")))
