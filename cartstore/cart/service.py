"""Cart store: in-memory snapshot mirrored to a key-value backend."""
import asyncio
import json
from typing import Callable, Optional, Tuple, Union

from cartstore.errors import ERROR_MALFORMED_CART, CartHydrationError
from cartstore.logging import get_logger, safe_text
from cartstore.money import to_float
from cartstore.storage import CartStorage, StorageKeys
from .models import (
    EMPTY_SNAPSHOT,
    CartEntry,
    CartProduct,
    Snapshot,
    snapshot_from_list,
    snapshot_to_list,
    subtotal,
    total_items,
)

logger = get_logger(__name__)

Listener = Callable[[Snapshot], None]


class CartStore:
    """
    Owns the cart snapshot and keeps the persisted copy in sync.

    Mutations are synchronous: they swap in a new snapshot, notify
    listeners and hand back the task writing that snapshot to storage
    (None when nothing changed). Callers may await the task or drop it;
    the store holds a reference until it finishes. Writes run one at a
    time in mutation order, so the last mutation's snapshot is the one
    left in storage.

    A failed write is logged and re-raised to anyone awaiting its task.
    The in-memory snapshot is not rolled back.

    Mutations need a running event loop.
    """

    def __init__(self, storage: CartStorage, key: str = StorageKeys.PRODUCTS) -> None:
        self._storage = storage
        self._key = key
        self._products: Snapshot = EMPTY_SNAPSHOT
        self._listeners: list[Listener] = []
        self._pending: set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()
        self.hydrated = False

    @property
    def products(self) -> Snapshot:
        """Current snapshot."""
        return self._products

    async def hydrate(self) -> Snapshot:
        """
        Load the persisted cart. Only the first call reads storage, even
        if that read or its parsing failed.

        Absent or empty blob leaves the cart empty.

        Raises:
            CartHydrationError: blob is not a valid JSON array of entries
        """
        if self.hydrated:
            return self._products
        self.hydrated = True

        stored = await self._storage.get(self._key)
        if not stored:
            logger.debug("No persisted cart found")
            return self._products

        try:
            products = snapshot_from_list(json.loads(stored))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Corrupted cart data under {self._key}: {e} (payload: {safe_text(stored)})")
            raise CartHydrationError(ERROR_MALFORMED_CART) from e

        self._replace(products)
        logger.info(f"Cart hydrated with {len(products)} entries")
        return self._products

    def lookup(self, product_id: str) -> Optional[Tuple[CartEntry, int]]:
        """Find an entry and its position by product id."""
        for index, entry in enumerate(self._products):
            if entry.id == product_id:
                return entry, index
        return None

    def add_to_cart(self, product: Union[CartProduct, dict]) -> asyncio.Task:
        """
        Add one unit of a product.

        A product already in the cart is incremented; its title, image
        and price are left as they were.
        """
        if isinstance(product, dict):
            product = CartProduct.from_dict(product)

        if self.lookup(product.id) is not None:
            return self.increment(product.id)

        logger.debug(f"Adding {safe_text(product.id)} ({safe_text(product.title)}) to cart")
        return self._commit(self._products + (CartEntry.from_product(product),))

    def increment(self, product_id: str) -> Optional[asyncio.Task]:
        """Add one unit to an existing entry. Unknown ids are ignored."""
        found = self.lookup(product_id)
        if found is None:
            return None

        entry, index = found
        new_products = list(self._products)
        new_products[index] = entry.with_quantity(entry.quantity + 1)
        return self._commit(tuple(new_products))

    def decrement(self, product_id: str) -> Optional[asyncio.Task]:
        """Remove one unit; the entry is dropped when it reaches zero. Unknown ids are ignored."""
        found = self.lookup(product_id)
        if found is None:
            return None

        entry, index = found
        new_products = list(self._products)
        if entry.quantity - 1 == 0:
            del new_products[index]
        else:
            new_products[index] = entry.with_quantity(entry.quantity - 1)
        return self._commit(tuple(new_products))

    def clear(self) -> asyncio.Task:
        """Empty the cart and persist the empty list."""
        return self._commit(EMPTY_SNAPSHOT)

    async def flush(self) -> None:
        """Wait for every write started so far. Write errors are not raised here."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with the new snapshot after every replacement.

        Listener errors are logged and do not affect the store.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def summary(self) -> dict:
        """Plain-dict view of the cart for display and debugging."""
        if not self._products:
            return {"is_empty": True, "total_items": 0, "items": [], "subtotal": 0}

        return {
            "is_empty": False,
            "total_items": total_items(self._products),
            "items": [
                {
                    "id": entry.id,
                    "title": entry.title,
                    "quantity": entry.quantity,
                    "unit_price": entry.price,
                    "total": to_float(entry.total_price),
                }
                for entry in self._products
            ],
            "subtotal": to_float(subtotal(self._products)),
        }

    def _replace(self, products: Snapshot) -> None:
        self._products = products
        for listener in list(self._listeners):
            try:
                listener(products)
            except Exception:
                logger.exception(f"Cart listener {listener!r} failed")

    def _commit(self, products: Snapshot) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        # Serialize now: the task must write this snapshot, not whatever
        # is current when it gets to run.
        payload = json.dumps(snapshot_to_list(products))
        self._replace(products)

        task = loop.create_task(self._write(payload, len(products)))
        self._pending.add(task)
        task.add_done_callback(self._write_done)
        return task

    async def _write(self, payload: str, count: int) -> None:
        async with self._write_lock:
            try:
                await self._storage.set(self._key, payload)
            except Exception as e:
                logger.error(f"Failed to persist cart ({count} entries): {e}")
                raise

    def _write_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        # Mark the error retrieved; it was already logged in _write
        if not task.cancelled():
            task.exception()
