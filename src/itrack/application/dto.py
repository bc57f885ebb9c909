"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from itrack.domain.model.product import Product
from itrack.domain.model.production import Production
from itrack.domain.model.value_objects import Number
from itrack.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ProductDTO:
    """Output: a product as it currently stands in the catalog."""

    id: str
    name: str
    type: str
    stock: Number
    price: str  # formatted, e.g. "$2.50"
    category: str | None
    last_restocked: str


@dataclass(frozen=True)
class ProductionLineDTO:
    """Output: one raw or produced line.

    ``product_name`` is the name recorded with the production; ``product``
    is the current catalog entry (None if it has since been removed).
    """

    product_id: str
    product_name: str
    quantity: Number
    product: ProductDTO | None


@dataclass(frozen=True)
class RatioDTO:
    raw_material_id: str
    raw_material_name: str
    produced_product_id: str
    produced_product_name: str
    ratio: Decimal


@dataclass(frozen=True)
class ProductionDTO:
    """Output: a production record resolved for display."""

    id: int
    date: datetime
    status: str
    raw_materials: list[ProductionLineDTO]
    produced_products: list[ProductionLineDTO]
    ratios: list[RatioDTO]
    notes: str | None
    created_at: datetime


@dataclass(frozen=True)
class ProductionStatsDTO:
    total_productions: int
    total_raw_materials_used: Number
    total_products_produced: Number
    raw_materials_breakdown: dict[str, Number]
    products_breakdown: dict[str, Number]


# --- Mapping ------------------------------------------------------------------


def to_product_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        type=product.type.value,
        stock=product.stock,
        price=str(product.price),
        category=product.category,
        last_restocked=product.last_restocked.strftime("%Y-%m-%d %H:%M UTC"),
    )


def to_production_dtos(
    productions: list[Production],
    product_repo: ProductRepository,
) -> list[ProductionDTO]:
    """Resolve product references of many records with one catalog lookup."""
    ids = {pid for production in productions for pid in production.product_ids}
    catalog = {p.id: to_product_dto(p) for p in product_repo.get_many(sorted(ids))}

    return [
        ProductionDTO(
            id=production.id,  # type: ignore[arg-type]
            date=production.date,
            status=production.status.value,
            raw_materials=[
                ProductionLineDTO(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    product=catalog.get(line.product_id),
                )
                for line in production.raw_materials
            ],
            produced_products=[
                ProductionLineDTO(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    product=catalog.get(line.product_id),
                )
                for line in production.produced_products
            ],
            ratios=[
                RatioDTO(
                    raw_material_id=r.raw_material_id,
                    raw_material_name=r.raw_material_name,
                    produced_product_id=r.produced_product_id,
                    produced_product_name=r.produced_product_name,
                    ratio=r.ratio,
                )
                for r in production.ratios
            ],
            notes=production.notes,
            created_at=production.created_at,
        )
        for production in productions
    ]
