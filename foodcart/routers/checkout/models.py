"""
Checkout API Pydantic Models
"""
from typing import Optional
from pydantic import BaseModel


class ApplyPromoRequest(BaseModel):
    code: str


class LineItemResponse(BaseModel):
    id: str
    name: str
    unit_price: str
    quantity: int
    placed_at: str


class UndoResponse(BaseModel):
    state: str  # hidden | visible
    item: Optional[LineItemResponse] = None


class CartResponse(BaseModel):
    items: list[LineItemResponse]
    total_items: int
    promo_code: str
    promo_applied: bool
    undo: UndoResponse
    subtotal: float
    tax_and_fees: float
    delivery: float
    total: float
    promo_result: Optional[str] = None  # accepted | rejected, only on apply


class PlaceOrderResponse(BaseModel):
    items: list[LineItemResponse]
    total_items: int
    promo_applied: bool
    subtotal: float
    tax_and_fees: float
    delivery: float
    total: float
