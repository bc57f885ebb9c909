"""Domain service: New-Product Provisioner.

Turns the produced-product lines of a production request into a uniform
list of ``ResolvedOutput`` entries. Lines that describe a new product are
created as one batch (stock 0, SELLING, price 0 unless given); the created
IDs are merged back in the caller's line order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from itrack.domain.exceptions import ProvisioningError, ValidationError
from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.production_request import (
    ExistingOutput,
    NewOutput,
    ProducedSpec,
    ResolvedOutput,
)
from itrack.domain.model.value_objects import Money
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.service.stock_ledger import StockLedger


@dataclass(frozen=True)
class ProvisionResult:
    outputs: list[ResolvedOutput]
    created: list[Product]


def validate_new_outputs(specs: list[ProducedSpec]) -> None:
    """Reject new-product lines without a name before anything is written."""
    for spec in specs:
        if isinstance(spec, NewOutput) and (not spec.name or not spec.name.strip()):
            raise ValidationError("New produced products require a name")


def build_new_product(spec: NewOutput, now: datetime) -> Product:
    return Product.create(
        name=spec.name,
        price=spec.price if spec.price is not None else Money.zero(),
        type=spec.type or ProductType.SELLING,
        stock=0,
        category=spec.category,
        now=now,
    )


class ProductProvisioner:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def provision(
        self,
        specs: list[ProducedSpec],
        now: datetime,
        ledger: StockLedger | None = None,
    ) -> ProvisionResult:
        """Create every NewOutput and return all lines resolved to product IDs.

        Raises ProvisioningError if the repository does not hand back one
        product with an ID per requested creation. Whatever was created is
        registered with ``ledger`` first, so the caller can undo it.
        """
        validate_new_outputs(specs)

        new_specs = [s for s in specs if isinstance(s, NewOutput)]
        created: list[Product] = []
        if new_specs:
            payloads = [build_new_product(s, now) for s in new_specs]
            created = self._product_repo.add_many(payloads)
            if ledger is not None:
                for product in created:
                    if product.id:
                        ledger.track_created(product)
            if len(created) != len(new_specs):
                raise ProvisioningError(
                    f"Failed to create all products. Expected {len(new_specs)}, "
                    f"created {len(created)}"
                )
            for index, product in enumerate(created):
                if not product.id:
                    raise ProvisioningError(
                        f"Failed to get created product at index {index}"
                    )

        outputs: list[ResolvedOutput] = []
        pending = iter(created)
        for spec in specs:
            if isinstance(spec, ExistingOutput):
                outputs.append(ResolvedOutput(spec.product_id, spec.quantity))
            else:
                outputs.append(ResolvedOutput(next(pending).id, spec.quantity))

        return ProvisionResult(outputs=outputs, created=created)
