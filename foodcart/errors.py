"""
Common Error Constants and Exceptions

Centralized error messages to avoid string duplication.
"""

# Cart errors
ERROR_CART_NOT_LOADED = "Cart has not finished loading"
ERROR_EMPTY_CART = "No items chosen"

# Session errors
ERROR_SESSION_NOT_FOUND = "Checkout session not found"


class CartError(Exception):
    """Base class for checkout cart errors."""


class CartNotLoadedError(CartError):
    """Totals were requested before the persisted snapshot was reconciled."""

    def __init__(self, message: str = ERROR_CART_NOT_LOADED):
        super().__init__(message)


class EmptyCartError(CartError):
    """An order was placed with no line items."""

    def __init__(self, message: str = ERROR_EMPTY_CART):
        super().__init__(message)


class SessionNotFoundError(CartError):
    """No open checkout session for the given id."""

    def __init__(self, session_id: str):
        super().__init__(f"{ERROR_SESSION_NOT_FOUND}: {session_id}")
        self.session_id = session_id
