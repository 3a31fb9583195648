"""
Cart errors.

Message constants are shared between raise sites and tests.
"""

ERROR_OUTSIDE_PROVIDER = "use_cart must be used within a CartProvider"
ERROR_MALFORMED_CART = "Persisted cart data is malformed"
ERROR_STORAGE_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"


class CartError(Exception):
    """Base class for cart errors."""


class CartConfigurationError(CartError, RuntimeError):
    """Cart accessed outside of an active provider scope."""


class CartHydrationError(CartError, ValueError):
    """Persisted cart blob could not be parsed into entries."""


class CartStorageError(CartError):
    """Persistence backend is not usable (missing config, client not installed)."""
