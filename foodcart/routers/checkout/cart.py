"""
Checkout Cart Router

Endpoints behind the checkout screen. A session is opened when the screen
is entered and closed when it is left; every other call works on the open
session's CartStore and responds with the recomputed cart.
"""
from fastapi import APIRouter, HTTPException, Depends

from foodcart.cart import CartStore, CheckoutSessions
from foodcart.errors import CartNotLoadedError, EmptyCartError, SessionNotFoundError
from foodcart.logging import get_logger, sanitize_id_for_logging
from foodcart.routers.deps import get_checkout_sessions
from .models import ApplyPromoRequest, CartResponse, PlaceOrderResponse

logger = get_logger(__name__)

router = APIRouter(tags=["checkout-cart"])


def _get_store(sessions: CheckoutSessions, session_id: str) -> CartStore:
    try:
        return sessions.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _cart_response(store: CartStore, **extra) -> dict:
    try:
        return {**store.summary(), **extra}
    except CartNotLoadedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/sessions/{session_id}", response_model=CartResponse)
async def open_session(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    """Enter the checkout screen: load the saved cart (or defaults)."""
    store = await sessions.open(session_id)
    return _cart_response(store)


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    """Leave the checkout screen."""
    if not await sessions.close(session_id):
        raise HTTPException(status_code=404, detail=str(SessionNotFoundError(session_id)))
    return {"closed": True}


@router.get("/sessions/{session_id}/cart", response_model=CartResponse)
async def get_cart(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    """Current items, promotion, undo state and totals."""
    return _cart_response(_get_store(sessions, session_id))


@router.post("/sessions/{session_id}/items/{item_id}/increment", response_model=CartResponse)
async def increment_item(session_id: str, item_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    store = _get_store(sessions, session_id)
    store.increment_quantity(item_id)
    return _cart_response(store)


@router.post("/sessions/{session_id}/items/{item_id}/decrement", response_model=CartResponse)
async def decrement_item(session_id: str, item_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    store = _get_store(sessions, session_id)
    store.decrement_quantity(item_id)
    return _cart_response(store)


@router.post("/sessions/{session_id}/items/{item_id}/cancel", response_model=CartResponse)
async def cancel_item(session_id: str, item_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    """Remove an item from the pending cart and show the undo toast."""
    store = _get_store(sessions, session_id)
    store.cancel_item(item_id)
    return _cart_response(store)


@router.post("/sessions/{session_id}/undo", response_model=CartResponse)
async def undo_cancel(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    store = _get_store(sessions, session_id)
    store.undo_cancel()
    return _cart_response(store)


@router.post("/sessions/{session_id}/undo/dismiss", response_model=CartResponse)
async def dismiss_undo(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    store = _get_store(sessions, session_id)
    store.dismiss_undo()
    return _cart_response(store)


@router.post("/sessions/{session_id}/promo/apply", response_model=CartResponse)
async def apply_promo(
    session_id: str,
    request: ApplyPromoRequest,
    sessions: CheckoutSessions = Depends(get_checkout_sessions),
):
    """Apply promo code. The client decides how to show a rejection."""
    store = _get_store(sessions, session_id)
    result = store.apply_promotion(request.code)
    return _cart_response(store, promo_result=result.value)


@router.post("/sessions/{session_id}/promo/remove", response_model=CartResponse)
async def remove_promo(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    store = _get_store(sessions, session_id)
    store.remove_promotion()
    return _cart_response(store)


@router.post("/sessions/{session_id}/place-order", response_model=PlaceOrderResponse)
async def place_order(session_id: str, sessions: CheckoutSessions = Depends(get_checkout_sessions)):
    """Record the promo flag for the payment step and return the order summary."""
    store = _get_store(sessions, session_id)
    try:
        order = await store.place_order()
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CartNotLoadedError as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(
        f"Order placed for session {sanitize_id_for_logging(session_id)}: "
        f"{order.total_items} items, total {order.totals.total}"
    )
    return {
        "items": [item.to_dict() for item in order.items],
        "total_items": order.total_items,
        "promo_applied": order.promo_applied,
        **order.totals.to_dict(),
    }
