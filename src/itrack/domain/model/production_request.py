"""Input side of a production run.

A produced-product line either points at an existing product or
describes a new one to create. The two cases are separate types so the
provisioner resolves them once and nothing downstream has to check
which fields happen to be present.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from itrack.domain.model.product import ProductType
from itrack.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class RawMaterialSpec:
    product_id: str
    quantity: Quantity


@dataclass(frozen=True)
class ExistingOutput:
    """Produce more of a product already in the catalog."""

    product_id: str
    quantity: Quantity


@dataclass(frozen=True)
class NewOutput:
    """Produce a product that does not exist yet.

    ``price`` and ``type`` fall back to zero and SELLING when provisioned.
    """

    name: str
    quantity: Quantity
    category: str | None = None
    price: Money | None = None
    type: ProductType | None = None


ProducedSpec = ExistingOutput | NewOutput


@dataclass(frozen=True)
class ResolvedOutput:
    """A produced line after provisioning: always backed by a product id."""

    product_id: str
    quantity: Quantity


@dataclass(frozen=True)
class ProductionRequest:
    raw_materials: list[RawMaterialSpec]
    produced_products: list[ProducedSpec]
    date: datetime | None = None
    notes: str | None = None
