"""Checkout API Router.

Combines checkout sub-routers into a single router with prefix /api/checkout.
"""

from fastapi import APIRouter

from .cart import router as cart_router

router = APIRouter(prefix="/api/checkout", tags=["checkout"])

router.include_router(cart_router)

__all__ = ["router"]
