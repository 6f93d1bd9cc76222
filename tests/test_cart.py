"""
Tests for cart models and pricing
"""

import json
import pytest
from decimal import Decimal

from foodcart.cart import (
    CancellationBuffer,
    LineItem,
    PromotionResult,
    UndoState,
    compute_totals,
    default_line_items,
)
from foodcart.cart.models import decode_line_items, encode_line_items
from foodcart.cart.pricing import effective_unit_price, is_recognized_code


class TestLineItem:
    """Tests for LineItem dataclass."""

    def test_create_line_item(self):
        """Test creating a line item normalizes id and price."""
        item = LineItem(id=7, name="Mango Lassi", unit_price=4.5, quantity=3)

        assert item.id == "7"
        assert item.unit_price == Decimal("4.5")
        assert item.quantity == 3
        assert item.placed_at == ""

    def test_quantity_must_be_positive(self):
        """Test an item can never exist with quantity below 1."""
        with pytest.raises(ValueError):
            LineItem(id="1", name="Test", unit_price="1.00", quantity=0)

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            LineItem(id="1", name="Test", unit_price="-1.00")

    def test_garbage_price_rejected(self):
        with pytest.raises(ValueError):
            LineItem(id="1", name="Test", unit_price="twelve")

    def test_to_dict(self):
        """Test serialization keeps the price as a decimal string."""
        item = LineItem(id="1", name="Test", unit_price="20.00", quantity=2, placed_at="29/11/24 15:00")

        data = item.to_dict()
        assert data == {
            "id": "1",
            "name": "Test",
            "unit_price": "20.00",
            "quantity": 2,
            "placed_at": "29/11/24 15:00",
        }

    def test_from_dict(self):
        """Test deserialization from dict."""
        data = {"id": "1", "name": "Test", "unit_price": 20.0, "quantity": 2}

        item = LineItem.from_dict(data)
        assert item.unit_price == Decimal("20.0")
        assert item.placed_at == ""


class TestSnapshotCodec:
    """Tests for the stored snapshot format."""

    def test_snapshot_roundtrip(self, sample_items):
        restored = decode_line_items(encode_line_items(sample_items))

        assert restored == sample_items

    def test_snapshot_is_json_array(self, sample_items):
        data = json.loads(encode_line_items(sample_items))

        assert [record["id"] for record in data] == ["1", "2"]
        assert "image" not in data[0]

    @pytest.mark.parametrize("blob", [
        "not json",
        '{"id": "1"}',
        '[{"id": "1", "name": "x"}]',
        '[{"id": "1", "name": "x", "unit_price": "abc", "quantity": 1}]',
        '[{"id": "1", "name": "x", "unit_price": "1.00", "quantity": 0}]',
        '["just a string"]',
        '[{"id": "1", "name": "a", "unit_price": "1.00", "quantity": 1}, {"id": "1", "name": "b", "unit_price": "2.00", "quantity": 1}]',
    ])
    def test_malformed_snapshot(self, blob):
        with pytest.raises(ValueError):
            decode_line_items(blob)


class TestDefaults:
    """Tests for the seed list."""

    def test_default_items(self):
        items = default_line_items()

        assert [item.id for item in items] == ["1", "2"]
        assert items[0].unit_price == Decimal("20.00")
        assert items[0].quantity == 2

    def test_default_items_are_fresh_copies(self):
        first = default_line_items()
        first[0].quantity = 99

        assert default_line_items()[0].quantity == 2


class TestPricing:
    """Tests for derived totals."""

    def test_totals_without_promo(self, sample_items):
        """Test the reference scenario without a promotion."""
        totals = compute_totals(sample_items, promotion_applied=False)

        assert totals.subtotal == Decimal("52.00")
        assert totals.tax_and_fees == Decimal("5.00")
        assert totals.delivery == Decimal("3.00")
        assert totals.total == Decimal("60.00")

    def test_totals_with_promo(self, sample_items):
        """Test promo halves prices and waives delivery."""
        totals = compute_totals(sample_items, promotion_applied=True)

        assert totals.subtotal == Decimal("26.00")
        assert totals.delivery == Decimal("0.00")
        assert totals.total == Decimal("31.00")

    def test_total_is_sum_of_parts(self):
        items = [
            LineItem(id="a", name="A", unit_price="3.35", quantity=3),
            LineItem(id="b", name="B", unit_price="0.99", quantity=7),
        ]
        for applied in (False, True):
            totals = compute_totals(items, promotion_applied=applied)
            assert totals.total == totals.subtotal + totals.tax_and_fees + totals.delivery

    def test_half_cent_rounds_up(self):
        items = [LineItem(id="a", name="A", unit_price="0.05", quantity=1)]

        assert compute_totals(items, promotion_applied=True).subtotal == Decimal("0.03")

    def test_custom_fees(self, sample_items):
        totals = compute_totals(sample_items, False, tax_and_fees=Decimal("1.50"), delivery_fee=Decimal("0"))

        assert totals.total == Decimal("53.50")

    def test_effective_unit_price(self, sample_items):
        assert effective_unit_price(sample_items[0], True) == Decimal("10.00")
        assert effective_unit_price(sample_items[0], False) == Decimal("20.00")

    def test_to_dict_uses_floats(self, sample_items):
        data = compute_totals(sample_items, False).to_dict()

        assert data == {"subtotal": 52.0, "tax_and_fees": 5.0, "delivery": 3.0, "total": 60.0}


class TestPromoCode:
    """Tests for promo code recognition."""

    @pytest.mark.parametrize("code", ["promo4377", "PROMO4377", "Promo4377"])
    def test_recognized(self, code):
        assert is_recognized_code(code)

    @pytest.mark.parametrize("code", ["", None, "promo", "promo43770", "SAVE10", " promo4377 "])
    def test_not_recognized(self, code):
        assert not is_recognized_code(code)

    def test_result_values(self):
        assert PromotionResult.ACCEPTED.value == "accepted"
        assert PromotionResult.REJECTED.value == "rejected"


class TestCancellationBuffer:
    def test_empty_buffer_is_hidden(self):
        assert CancellationBuffer().state == UndoState.HIDDEN

    def test_visible_buffer(self, sample_items):
        buffer = CancellationBuffer(item=sample_items[0], visible=True)

        assert buffer.state == UndoState.VISIBLE
