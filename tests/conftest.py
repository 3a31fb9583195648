"""Pytest configuration and fixtures"""
import os
import pytest

# Set test environment variables before the package configures logging
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from cartstore.cart import CartProduct, CartStore  # noqa: E402
from cartstore.storage import MemoryStorage  # noqa: E402


@pytest.fixture
def memory_storage():
    """Empty in-memory backend"""
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    """Cart store over the in-memory backend"""
    return CartStore(memory_storage)


@pytest.fixture
def shirt():
    """Sample product"""
    return CartProduct(id="A", title="Shirt", image_url="u", price=10)


@pytest.fixture
def shoes():
    """Second sample product"""
    return CartProduct(
        id="B",
        title="Running shoes",
        image_url="https://cdn.example.com/shoes.png",
        price=89.9,
    )
