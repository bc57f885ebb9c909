"""Product aggregate.

A product is either a raw material (consumed by production runs) or a
selling product (produced, then sold). Its ``stock`` counter is the
authoritative stock level and can never go below zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from itrack.domain.exceptions import InsufficientStockError, ValidationError
from itrack.domain.model.value_objects import Money, Number


class ProductType(Enum):
    RAW = "raw"
    SELLING = "selling"


@dataclass
class Product:
    """A product in the catalog.

    ``id`` is None until the repository assigns one. Stock is only changed
    through ``debit``/``credit`` (or an explicit ``set_stock``) so the
    non-negativity invariant is checked at every mutation.
    """

    id: str | None
    name: str
    price: Money
    type: ProductType = ProductType.SELLING
    stock: Number = 0
    category: str | None = None
    supplier_id: str | None = None
    seller_id: str | None = None
    last_restocked: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(
                f"Stock for {self.name} cannot be negative, got {self.stock}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        price: Money | None = None,
        type: ProductType = ProductType.SELLING,
        stock: Number = 0,
        category: str | None = None,
        supplier_id: str | None = None,
        seller_id: str | None = None,
        now: datetime | None = None,
    ) -> Product:
        """Build a new, not yet persisted product."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        return Product(
            id=None,
            name=name.strip(),
            price=price if price is not None else Money.zero(),
            type=type,
            stock=stock,
            category=category or None,
            supplier_id=supplier_id,
            seller_id=seller_id,
            last_restocked=now or datetime.now(timezone.utc),
        )

    # --- Stock mutations ------------------------------------------------------

    def can_supply(self, quantity: Number) -> bool:
        return self.stock >= quantity

    def debit(self, quantity: Number) -> None:
        """Consume ``quantity`` units, refusing to go below zero."""
        if quantity <= 0:
            raise ValidationError("Debit quantity must be positive")
        if not self.can_supply(quantity):
            raise InsufficientStockError(self.name, self.stock, quantity)
        self.stock -= quantity

    def credit(self, quantity: Number, restocked_at: datetime | None = None) -> None:
        """Add ``quantity`` units and stamp the restock time."""
        if quantity <= 0:
            raise ValidationError("Credit quantity must be positive")
        self.stock += quantity
        if restocked_at is not None:
            self.last_restocked = restocked_at

    def set_stock(self, stock: Number) -> None:
        if stock < 0:
            raise ValidationError(
                f"Stock for {self.name} cannot be negative, got {stock}"
            )
        self.stock = stock

    # --- Queries --------------------------------------------------------------

    @property
    def is_raw(self) -> bool:
        return self.type == ProductType.RAW

    def is_below(self, threshold: Number) -> bool:
        return self.stock < threshold
