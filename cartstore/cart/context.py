"""
Provider scope for the cart store.

    async with CartProvider(MemoryStorage()):
        cart = use_cart()
        await cart.add_to_cart(product)

The store is bound to a ContextVar, so tasks created inside the block
see it and code outside does not.
"""

from contextvars import ContextVar, Token
from typing import Optional

from cartstore.errors import ERROR_OUTSIDE_PROVIDER, CartConfigurationError
from cartstore.storage import CartStorage, StorageKeys
from .service import CartStore

_current_cart: ContextVar[Optional[CartStore]] = ContextVar("_current_cart", default=None)


class CartProvider:
    """
    Async context manager that hydrates a store and makes it reachable
    through use_cart() for the duration of the block.

    Pass either a storage backend or an already constructed store.
    """

    def __init__(
        self,
        storage: Optional[CartStorage] = None,
        *,
        store: Optional[CartStore] = None,
        key: str = StorageKeys.PRODUCTS,
    ) -> None:
        if store is None:
            if storage is None:
                raise CartConfigurationError("CartProvider needs a storage backend or a store")
            store = CartStore(storage, key=key)
        self.store = store
        self._token: Optional[Token] = None

    async def __aenter__(self) -> CartStore:
        await self.store.hydrate()
        self._token = _current_cart.set(self.store)
        return self.store

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._token is not None:
            _current_cart.reset(self._token)
            self._token = None


def use_cart() -> CartStore:
    """
    Return the store of the enclosing CartProvider.

    Raises:
        CartConfigurationError: called outside a CartProvider
    """
    store = _current_cart.get()
    if store is None:
        raise CartConfigurationError(ERROR_OUTSIDE_PROVIDER)
    return store
