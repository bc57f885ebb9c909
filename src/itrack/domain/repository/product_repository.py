"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.

Implementations hand out copies: mutating a returned Product has no
effect until it is passed back to ``save``. Stock changes go through the
conditional ``decrement_stock_if_sufficient`` and ``increment_stock``,
each of which must be atomic for a single product.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from itrack.domain.model.product import Product
from itrack.domain.model.value_objects import Number


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_many(self, product_ids: list[str]) -> list[Product]:
        """Return the products that exist among ``product_ids`` (unordered, deduplicated)."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def list_below_stock(self, threshold: Number) -> list[Product]:
        """Return products with ``stock < threshold``, lowest stock first."""

    @abstractmethod
    def add_many(self, products: list[Product]) -> list[Product]:
        """Insert new products as one batch and return them with IDs assigned."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def remove(self, product_id: str) -> None:
        """Delete a product. Only used to undo a creation within the same attempt."""

    @abstractmethod
    def decrement_stock_if_sufficient(
        self, product_id: str, quantity: Number
    ) -> Product | None:
        """Atomically apply ``stock -= quantity`` iff ``stock >= quantity``.

        Returns the updated product, or None when the product is missing or
        its stock is insufficient. Never leaves stock negative.
        """

    @abstractmethod
    def increment_stock(
        self,
        product_id: str,
        quantity: Number,
        restocked_at: datetime | None = None,
    ) -> Product | None:
        """Atomically apply ``stock += quantity``; None if the product is missing."""
