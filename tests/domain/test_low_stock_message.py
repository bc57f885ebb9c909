"""Unit tests for the low-stock alert message bodies."""

from itrack.domain.model.product import Product
from itrack.domain.model.value_objects import Money
from itrack.domain.service.low_stock_message import (
    format_html,
    format_subject,
    format_text,
)


def _products() -> list[Product]:
    return [
        Product(id="1", name="Flour", price=Money.of("2"), stock=3, category="Baking", supplier_id="S-9"),
        Product(id="2", name="Salt & <Pepper>", price=Money.of("1.5"), stock=7),
    ]


class TestLowStockMessage:

    def test_subject_counts_items(self):
        assert format_subject(_products()) == "Low Stock Alert: 2 Item(s) Need Attention"

    def test_text_lists_every_product(self):
        text = format_text(_products(), 10)
        assert "You have 2 product(s) with stock below 10 units:" in text
        assert "1. Flour" in text
        assert "Category: Baking" in text
        assert "Current Stock: 3 units" in text
        assert "Price: $2.00" in text
        assert "Supplier: S-9" in text
        assert "2. Salt & <Pepper>" in text

    def test_text_missing_fields_shown_as_na(self):
        text = format_text(_products()[1:], 10)
        assert "Category: N/A" in text
        assert "Supplier: N/A" in text

    def test_html_escapes_names(self):
        html = format_html(_products(), 10)
        assert "Salt &amp; &lt;Pepper&gt;" in html
        assert "<Pepper>" not in html
        assert "Current Stock: 7 units" in html
