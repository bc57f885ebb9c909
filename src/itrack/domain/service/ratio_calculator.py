"""Conversion ratios for a production run.

Every raw material is paired with every produced product; each entry is
the produced quantity divided by the consumed quantity for that pair.
The matrix is not an allocation: with several inputs and outputs the
entries do not sum to one.
"""

from __future__ import annotations

from decimal import Decimal

from itrack.domain.model.production import (
    ProducedProductLine,
    RatioEntry,
    RawMaterialLine,
)


def conversion_ratio(produced_quantity, raw_quantity) -> Decimal:
    """Produced units per consumed unit; 0 when nothing was consumed."""
    if raw_quantity <= 0:
        return Decimal("0")
    return Decimal(produced_quantity) / Decimal(raw_quantity)


def compute_ratios(
    raw_materials: list[RawMaterialLine],
    produced_products: list[ProducedProductLine],
) -> list[RatioEntry]:
    """Return ``len(raw_materials) * len(produced_products)`` entries, raw-major."""
    return [
        RatioEntry(
            raw_material_id=rm.product_id,
            raw_material_name=rm.product_name,
            produced_product_id=pp.product_id,
            produced_product_name=pp.product_name,
            ratio=conversion_ratio(pp.quantity, rm.quantity),
        )
        for rm in raw_materials
        for pp in produced_products
    ]
