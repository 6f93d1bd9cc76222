"""
foodcart Core Module

This package contains the checkout components:
- db: Upstash Redis client and key names
- cart: line items, pricing, CartStore and checkout sessions
- routers: FastAPI endpoints for the checkout screen

Note: Imports are lazy to keep module loading cheap.
"""

__all__ = [
    "get_redis",
    "CartStore",
    "CheckoutSessions",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "get_redis":
        from foodcart.db import get_redis
        return get_redis
    elif name == "CartStore":
        from foodcart.cart import CartStore
        return CartStore
    elif name == "CheckoutSessions":
        from foodcart.cart import CheckoutSessions
        return CheckoutSessions
    raise AttributeError(f"module 'foodcart' has no attribute '{name}'")
