"""Persisted shopping-cart state for the mobile storefront."""
from cartstore.cart import (
    CartEntry,
    CartProduct,
    CartProvider,
    CartStore,
    use_cart,
)
from cartstore.errors import (
    CartConfigurationError,
    CartError,
    CartHydrationError,
    CartStorageError,
)
from cartstore.storage import CartStorage, MemoryStorage, RedisStorage, StorageKeys

__all__ = [
    "CartConfigurationError",
    "CartEntry",
    "CartError",
    "CartHydrationError",
    "CartProduct",
    "CartProvider",
    "CartStorage",
    "CartStorageError",
    "CartStore",
    "MemoryStorage",
    "RedisStorage",
    "StorageKeys",
    "use_cart",
]
