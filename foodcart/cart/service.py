"""Checkout cart store reconciled with a key-value store."""
import asyncio
import json
import os
import time
from decimal import Decimal
from typing import Callable, List, Optional

from foodcart.db import RedisKeys
from foodcart.errors import CartNotLoadedError, EmptyCartError
from foodcart.logging import get_logger, mask_code_for_logging, sanitize_id_for_logging
from .models import (
    CancellationBuffer,
    CartTotals,
    LineItem,
    OrderSummary,
    PromotionState,
    decode_line_items,
    default_line_items,
    encode_line_items,
)
from .pricing import (
    DELIVERY_FEE,
    PROMO_CODE,
    TAX_AND_FEES,
    PromotionResult,
    compute_totals,
    is_recognized_code,
)
from .storage import KeyValueStore

logger = get_logger(__name__)

# 0 keeps the undo affordance until it is dismissed
UNDO_TIMEOUT_SECONDS = float(os.environ.get("CART_UNDO_TIMEOUT_SECONDS", "0"))


class CartStore:
    """
    In-memory cart for one checkout session.

    Features:
    - Loads the persisted snapshot once, falling back to the seed list
    - Saves the whole list after every change (fire-and-forget, in order)
    - Single promo code that halves prices and waives delivery
    - Single-slot undo for cancelled items

    Mutations are synchronous and must be called from the running event
    loop; persistence happens in background tasks.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        promo_code: str = PROMO_CODE,
        tax_and_fees: Decimal = TAX_AND_FEES,
        delivery_fee: Decimal = DELIVERY_FEE,
        undo_timeout: float = UNDO_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._storage = storage
        self._promo_code = promo_code
        self._tax_and_fees = tax_and_fees
        self._delivery_fee = delivery_fee
        self._undo_timeout = undo_timeout
        self._clock = clock

        self._items: List[LineItem] = []
        self._promotion = PromotionState()
        self._buffer = CancellationBuffer()
        self._loaded = False

        self._save_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    # ==================== LOADING ====================

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> List[LineItem]:
        """Adopt the persisted snapshot, or the seed list if there is none."""
        items = await self._read_snapshot()
        if not items:
            logger.info("No saved cart, using default items")
            items = default_line_items()
        self._items = items
        self._loaded = True
        return self.items

    async def _read_snapshot(self) -> List[LineItem]:
        try:
            blob = await self._storage.get(RedisKeys.CART_ITEMS)
        except Exception as e:
            logger.warning(f"Failed to read saved cart: {e}")
            return []

        if not blob:
            return []

        try:
            return decode_line_items(blob)
        except ValueError as e:
            # Corrupted data - ignore it, the next save overwrites it
            logger.warning(f"Corrupted cart snapshot: {e}")
            return []

    # ==================== READS ====================

    @property
    def items(self) -> List[LineItem]:
        """Copy of the current line items, in display order."""
        return [item.copy() for item in self._items]

    @property
    def promotion(self) -> PromotionState:
        return PromotionState(code=self._promotion.code, applied=self._promotion.applied)

    @property
    def cancellation(self) -> CancellationBuffer:
        self._expire_undo()
        item = self._buffer.item.copy() if self._buffer.item is not None else None
        return CancellationBuffer(item=item, visible=self._buffer.visible, expires_at=self._buffer.expires_at)

    def totals(self) -> CartTotals:
        """Recomputed on every call."""
        if not self._loaded:
            raise CartNotLoadedError()
        return compute_totals(
            self._items,
            self._promotion.applied,
            tax_and_fees=self._tax_and_fees,
            delivery_fee=self._delivery_fee,
        )

    def summary(self) -> dict:
        """Snapshot for the presentation layer."""
        buffer = self.cancellation
        return {
            "items": [item.to_dict() for item in self._items],
            "total_items": sum(item.quantity for item in self._items),
            "promo_code": self._promotion.code,
            "promo_applied": self._promotion.applied,
            "undo": {
                "state": buffer.state.value,
                "item": buffer.item.to_dict() if buffer.item is not None else None,
            },
            **self.totals().to_dict(),
        }

    # ==================== QUANTITY ====================

    def _find(self, item_id: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.id == str(item_id)), None)

    def increment_quantity(self, item_id: str) -> bool:
        """Add one unit. Unknown ids are ignored."""
        item = self._find(item_id)
        if item is None:
            logger.debug(f"increment: unknown item {sanitize_id_for_logging(item_id)}")
            return False
        item.quantity += 1
        self._schedule_save()
        return True

    def decrement_quantity(self, item_id: str) -> bool:
        """Remove one unit, never going below 1."""
        item = self._find(item_id)
        if item is None:
            logger.debug(f"decrement: unknown item {sanitize_id_for_logging(item_id)}")
            return False
        changed = item.quantity > 1
        if changed:
            item.quantity -= 1
        self._schedule_save()
        return changed

    # ==================== CANCEL / UNDO ====================

    def cancel_item(self, item_id: str) -> Optional[LineItem]:
        """
        Take an item out of the cart and offer undo.

        A previously buffered item is dropped for good.
        """
        item = self._find(item_id)
        if item is None:
            logger.debug(f"cancel: unknown item {sanitize_id_for_logging(item_id)}")
            return None

        self._items = [existing for existing in self._items if existing is not item]
        if self._buffer.item is not None:
            logger.debug(f"Discarding buffered item {sanitize_id_for_logging(self._buffer.item.id)}")

        expires_at = self._clock() + self._undo_timeout if self._undo_timeout > 0 else None
        self._buffer = CancellationBuffer(item=item, visible=True, expires_at=expires_at)
        self._schedule_save()
        return item.copy()

    def undo_cancel(self) -> bool:
        """Put the buffered item back at the end of the list."""
        self._expire_undo()
        if not self._buffer.visible or self._buffer.item is None:
            return False

        self._items.append(self._buffer.item)
        self._buffer = CancellationBuffer()
        self._schedule_save()
        return True

    def dismiss_undo(self) -> None:
        """Hide the undo affordance; the cancelled item stays removed."""
        self._buffer = CancellationBuffer()

    def _expire_undo(self) -> None:
        expires_at = self._buffer.expires_at
        if expires_at is not None and self._clock() >= expires_at:
            self.dismiss_undo()

    # ==================== PROMOTION ====================

    def apply_promotion(self, code: str) -> PromotionResult:
        """Activate the promotion if ``code`` is the recognized one."""
        if not is_recognized_code(code, self._promo_code):
            logger.info(f"Rejected promo code {mask_code_for_logging(code)}")
            return PromotionResult.REJECTED

        if not self._promotion.applied:
            self._promotion = PromotionState(code=code, applied=True)
        return PromotionResult.ACCEPTED

    def remove_promotion(self) -> None:
        """Deactivate and clear the typed code."""
        self._promotion = PromotionState()

    # ==================== ORDER ====================

    async def place_order(self) -> OrderSummary:
        """
        Hand the cart to the payment step.

        Writes the promotion flag for the payment screen; a failed write is
        logged and does not block the order.

        Raises:
            EmptyCartError: if every item was cancelled
        """
        totals = self.totals()
        if not self._items:
            raise EmptyCartError()

        applied = self._promotion.applied
        await self._write(RedisKeys.PROMO_APPLIED, json.dumps(applied))
        return OrderSummary(items=self.items, totals=totals, promo_applied=applied)

    # ==================== PERSISTENCE ====================

    def _schedule_save(self) -> None:
        # An empty list is never written so the next load falls back to defaults
        if not self._items:
            logger.debug("Cart is empty, skipping save")
            return

        blob = encode_line_items(self._items)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Memory already changed; without a loop the save is dropped
            logger.warning("No running event loop, cart change not saved")
            return
        task = loop.create_task(self._write(RedisKeys.CART_ITEMS, blob))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, value: str) -> bool:
        # Lock waiters are served FIFO, so writes land in issuance order
        async with self._save_lock:
            try:
                ok = await self._storage.set(key, value)
            except Exception as e:
                logger.error(f"Failed to save {key}: {e}", exc_info=True)
                return False
        if not ok:
            logger.error(f"Store rejected write of {key}")
        return bool(ok)

    async def flush(self) -> None:
        """Wait for every save issued so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def close(self) -> None:
        """End of the checkout session."""
        await self.flush()
        self.dismiss_undo()
