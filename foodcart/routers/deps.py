"""
Shared Dependencies for Routers

Lazy-loaded singletons to optimize cold start.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from foodcart.cart import CheckoutSessions


_checkout_sessions: Optional["CheckoutSessions"] = None


def get_checkout_sessions() -> "CheckoutSessions":
    """Get or create CheckoutSessions singleton (lazy loaded)"""
    global _checkout_sessions
    if _checkout_sessions is None:
        from foodcart.cart import CheckoutSessions
        _checkout_sessions = CheckoutSessions()
    return _checkout_sessions


async def shutdown_services():
    """Flush and drop every open checkout session."""
    global _checkout_sessions
    if _checkout_sessions is not None:
        await _checkout_sessions.close_all()
        _checkout_sessions = None
