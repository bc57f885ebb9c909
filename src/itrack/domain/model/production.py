"""Production record: the immutable history of one conversion run.

A Production captures which raw materials were consumed, which products
came out, and the conversion ratio of every (raw, produced) pair. Product
names are snapshotted so history reads the same after a product is renamed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from itrack.domain.model.value_objects import Number


class ProductionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class RawMaterialLine:
    product_id: str
    quantity: Number
    product_name: str  # snapshot at commit time


@dataclass(frozen=True)
class ProducedProductLine:
    product_id: str
    quantity: Number
    product_name: str  # snapshot at commit time


@dataclass(frozen=True)
class RatioEntry:
    """Units of the produced product per unit of the raw material, for one run."""

    raw_material_id: str
    raw_material_name: str
    produced_product_id: str
    produced_product_name: str
    ratio: Decimal


@dataclass(frozen=True)
class Production:
    """Immutable production record.

    The repository assigns ``id`` on insert and returns a new instance;
    nothing mutates a record after it is stored.
    """

    id: int | None
    date: datetime
    raw_materials: tuple[RawMaterialLine, ...]
    produced_products: tuple[ProducedProductLine, ...]
    ratios: tuple[RatioEntry, ...]
    status: ProductionStatus = ProductionStatus.COMPLETED
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_raw_used(self) -> Number:
        return sum((line.quantity for line in self.raw_materials), 0)

    @property
    def total_produced(self) -> Number:
        return sum((line.quantity for line in self.produced_products), 0)

    @property
    def product_ids(self) -> list[str]:
        """Every product touched by this run, raw materials first."""
        ids = [line.product_id for line in self.raw_materials]
        ids += [line.product_id for line in self.produced_products]
        return ids
