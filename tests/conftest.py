"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from foodcart.cart import CartStore, CheckoutSessions, LineItem
from tests.helpers import InMemoryStore


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store"""
    return InMemoryStore()


@pytest.fixture
def cart_store(memory_store):
    """CartStore over the in-memory store, not yet loaded"""
    return CartStore(memory_store)


@pytest.fixture
def sample_items():
    """The two-item cart used throughout the checkout scenarios"""
    return [
        LineItem(id="1", name="Strawberry Shake", unit_price=Decimal("20.00"), quantity=2, placed_at="29/11/24 15:00"),
        LineItem(id="2", name="Broccoli Lasagna", unit_price=Decimal("12.00"), quantity=1, placed_at="29/11/24 12:00"),
    ]


@pytest.fixture
def shared_data():
    """Backing dict shared by every session store"""
    return {}


@pytest.fixture
def checkout_sessions(shared_data):
    """Session registry whose stores share one in-memory dict"""
    return CheckoutSessions(storage_factory=lambda sid: InMemoryStore(shared_data, prefix=f"checkout:{sid}:"))


@pytest.fixture
def mock_redis():
    """Mock Upstash async Redis client"""
    redis = Mock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    return redis
