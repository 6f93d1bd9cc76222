"""
Checkout pricing rules.

One promo code exists. When active it halves every unit price and waives
the delivery fee. Tax and fees are a flat amount.
"""
import os
from decimal import Decimal
from enum import Enum
from typing import Iterable

from foodcart.services.money import add, multiply, round_money, to_decimal
from .models import CartTotals, LineItem


PROMO_CODE = os.environ.get("CART_PROMO_CODE", "promo4377")
TAX_AND_FEES = round_money(os.environ.get("CART_TAX_AND_FEES", "5.00"))
DELIVERY_FEE = round_money(os.environ.get("CART_DELIVERY_FEE", "3.00"))
PROMO_PRICE_FACTOR = Decimal("0.5")


class PromotionResult(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def normalize_code(code: str | None) -> str:
    """Case-insensitive form used for comparison."""
    return (code or "").lower()


def is_recognized_code(code: str | None, recognized: str = PROMO_CODE) -> bool:
    normalized = normalize_code(code)
    return bool(normalized) and normalized == normalize_code(recognized)


def effective_unit_price(item: LineItem, promotion_applied: bool) -> Decimal:
    """Unit price after the promotion, if any."""
    if promotion_applied:
        return multiply(item.unit_price, PROMO_PRICE_FACTOR)
    return item.unit_price


def compute_totals(
    items: Iterable[LineItem],
    promotion_applied: bool,
    tax_and_fees: Decimal = TAX_AND_FEES,
    delivery_fee: Decimal = DELIVERY_FEE,
) -> CartTotals:
    """
    Recompute the price summary from scratch.

    Calculation order:
    1. subtotal = sum of effective unit price * quantity, rounded to cents
    2. delivery is waived while the promotion is active
    3. total = subtotal + tax_and_fees + delivery
    """
    subtotal = Decimal("0")
    for item in items:
        subtotal = add(subtotal, multiply(effective_unit_price(item, promotion_applied), item.quantity))
    subtotal = round_money(subtotal)

    tax = round_money(to_decimal(tax_and_fees))
    delivery = Decimal("0.00") if promotion_applied else round_money(to_decimal(delivery_fee))

    return CartTotals(
        subtotal=subtotal,
        tax_and_fees=tax,
        delivery=delivery,
        total=subtotal + tax + delivery,
    )
