"""Plain-text and HTML bodies for the batched low-stock alert."""

from __future__ import annotations

from html import escape

from itrack.domain.model.product import Product
from itrack.domain.model.value_objects import Number

_FOOTER = "This is an automated message from your Inventory Tracker system."


def format_subject(products: list[Product]) -> str:
    return f"Low Stock Alert: {len(products)} Item(s) Need Attention"


def format_text(products: list[Product], threshold: Number) -> str:
    lines = [
        "Low Stock Alert",
        "",
        f"You have {len(products)} product(s) with stock below {threshold} units:",
        "",
    ]
    for index, product in enumerate(products, start=1):
        lines += [
            f"{index}. {product.name}",
            f"   Category: {product.category or 'N/A'}",
            f"   Current Stock: {product.stock} units",
            f"   Price: {product.price}",
            f"   Supplier: {product.supplier_id or 'N/A'}",
            "",
        ]
    lines += [
        "Please restock these items soon to avoid stockouts.",
        "",
        _FOOTER,
    ]
    return "\n".join(lines)


def format_html(products: list[Product], threshold: Number) -> str:
    items = "".join(
        '<div class="product-item">'
        f'<div class="product-name">{escape(product.name)}</div>'
        f'<div class="product-detail">Category: {escape(product.category or "N/A")}</div>'
        f'<div class="product-detail stock-warning">Current Stock: {product.stock} units</div>'
        f'<div class="product-detail">Price: {product.price}</div>'
        f'<div class="product-detail">Supplier: {escape(product.supplier_id or "N/A")}</div>'
        "</div>"
        for product in products
    )
    return (
        "<!DOCTYPE html><html><head><style>"
        "body { font-family: Arial, sans-serif; color: #333; }"
        ".product-item { padding: 10px; margin: 10px 0; border-left: 4px solid #ff9800; }"
        ".product-name { font-weight: bold; }"
        ".stock-warning { color: #dc3545; font-weight: bold; }"
        "</style></head><body>"
        f"<h2>Low Stock Alert</h2><p>{len(products)} product(s) need attention</p>"
        f"<p>You have <strong>{len(products)}</strong> product(s) with stock below "
        f"<strong>{threshold}</strong> units:</p>"
        f"{items}"
        "<p><strong>Please restock these items soon to avoid stockouts.</strong></p>"
        f"<p>{_FOOTER}</p>"
        "</body></html>"
    )
