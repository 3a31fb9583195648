"""Cart package: models, store, and provider scope."""
from .models import CartEntry, CartProduct, Snapshot, subtotal, total_items
from .service import CartStore
from .context import CartProvider, use_cart

__all__ = [
    "CartEntry",
    "CartProduct",
    "CartProvider",
    "CartStore",
    "Snapshot",
    "subtotal",
    "total_items",
    "use_cart",
]
