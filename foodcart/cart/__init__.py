"""Cart package: models, pricing, storage, and the checkout store."""
from .models import (
    CancellationBuffer,
    CartTotals,
    LineItem,
    OrderSummary,
    PromotionState,
    UndoState,
    default_line_items,
)
from .pricing import PromotionResult, compute_totals
from .service import CartStore
from .sessions import CheckoutSessions
from .storage import KeyValueStore, RedisKeyValueStore

__all__ = [
    "CancellationBuffer",
    "CartStore",
    "CartTotals",
    "CheckoutSessions",
    "KeyValueStore",
    "LineItem",
    "OrderSummary",
    "PromotionResult",
    "PromotionState",
    "RedisKeyValueStore",
    "UndoState",
    "compute_totals",
    "default_line_items",
]
