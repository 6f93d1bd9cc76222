"""Cart models with Decimal-based pricing."""
import json
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from foodcart.services.money import parse_decimal, to_float


@dataclass
class LineItem:
    """Single product entry in the cart."""
    id: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    placed_at: str = ""  # Opaque "dd/mm/yy HH:MM" label

    def __post_init__(self):
        self.id = str(self.id)
        self.unit_price = parse_decimal(self.unit_price)
        if self.unit_price < 0:
            raise ValueError("unit_price must be non-negative")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")

    def copy(self) -> "LineItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary (the display asset is never part of it)."""
        return {
            "id": self.id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "placed_at": self.placed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=str(data["name"]),
            unit_price=data["unit_price"],
            quantity=int(data["quantity"]),
            placed_at=str(data.get("placed_at", "")),
        )


def encode_line_items(items: List[LineItem]) -> str:
    """Serialize the ordered item list for the key-value store."""
    return json.dumps([item.to_dict() for item in items])


def decode_line_items(blob: str) -> List[LineItem]:
    """
    Parse a stored snapshot.

    Raises:
        ValueError: on malformed JSON or records
    """
    data = json.loads(blob)
    if not isinstance(data, list):
        raise ValueError("Cart snapshot must be a JSON array")
    try:
        items = [LineItem.from_dict(record) for record in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed line item: {e}") from e
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate line item id in cart snapshot")
    return items


# Shown when nothing usable was saved yet
DEFAULT_LINE_ITEMS = (
    {"id": "1", "name": "Strawberry Shake", "unit_price": "20.00", "quantity": 2, "placed_at": "29/11/24 15:00"},
    {"id": "2", "name": "Broccoli Lasagna", "unit_price": "12.00", "quantity": 1, "placed_at": "29/11/24 12:00"},
)


def default_line_items() -> List[LineItem]:
    """Fresh copy of the seed list."""
    return [LineItem.from_dict(record) for record in DEFAULT_LINE_ITEMS]


@dataclass
class PromotionState:
    """User-entered promo text and whether it is active."""
    code: str = ""
    applied: bool = False


class UndoState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass
class CancellationBuffer:
    """Single-slot holder for the most recently cancelled item."""
    item: Optional[LineItem] = None
    visible: bool = False
    expires_at: Optional[float] = None

    @property
    def state(self) -> UndoState:
        if self.visible and self.item is not None:
            return UndoState.VISIBLE
        return UndoState.HIDDEN


@dataclass(frozen=True)
class CartTotals:
    """Derived price summary. Never stored."""
    subtotal: Decimal
    tax_and_fees: Decimal
    delivery: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "subtotal": to_float(self.subtotal),
            "tax_and_fees": to_float(self.tax_and_fees),
            "delivery": to_float(self.delivery),
            "total": to_float(self.total),
        }


@dataclass
class OrderSummary:
    """What the payment step receives when an order is placed."""
    items: List[LineItem]
    totals: CartTotals
    promo_applied: bool

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)
