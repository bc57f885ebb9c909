"""Domain service: Stock Ledger.

Applies the stock mutations of one production attempt and remembers
each of them, so that a failure anywhere in the attempt can be undone by
applying the inverse operations in reverse order (a saga).

One ledger instance belongs to exactly one attempt. The conditional
debit is delegated to the repository, which performs the check and the
decrement as a single atomic step per product.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from itrack.domain.exceptions import (
    ConsistencyError,
    InsufficientStockError,
    NotFoundError,
)
from itrack.domain.model.product import Product
from itrack.domain.model.value_objects import Number
from itrack.domain.repository.product_repository import ProductRepository
from itrack.logging_config import get_logger

logger = get_logger("ledger")


class MutationKind(Enum):
    CREATE = "create"
    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class TrackedMutation:
    """One applied change, with enough state to invert it."""

    kind: MutationKind
    product_id: str
    quantity: Number = 0
    previous_restocked_at: datetime | None = None


class StockLedger:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._applied: list[TrackedMutation] = []

    @property
    def applied(self) -> list[TrackedMutation]:
        return list(self._applied)

    # --- Tracked operations ---------------------------------------------------

    def apply_and_track(
        self,
        apply: Callable[[], TrackedMutation],
    ) -> TrackedMutation:
        """Run one mutation and record it for compensation.

        ``apply`` either performs its change and describes it, or raises
        without having changed anything.
        """
        mutation = apply()
        self._applied.append(mutation)
        return mutation

    def track_created(self, product: Product) -> TrackedMutation:
        """Register a product created during this attempt."""
        return self.apply_and_track(
            lambda: TrackedMutation(MutationKind.CREATE, product.id)
        )

    def debit(self, product_id: str, quantity: Number, product_name: str) -> TrackedMutation:
        """Conditionally consume stock; raise if it is not available.

        The reported ``available`` figure is re-read after the refusal so
        it reflects concurrent movement, not the value seen at validation.
        """

        def apply() -> TrackedMutation:
            updated = self._product_repo.decrement_stock_if_sufficient(product_id, quantity)
            if updated is None:
                current = self._product_repo.get_by_id(product_id)
                available = current.stock if current is not None else 0
                raise InsufficientStockError(product_name, available, quantity)
            return TrackedMutation(MutationKind.DEBIT, product_id, quantity)

        return self.apply_and_track(apply)

    def credit(self, product_id: str, quantity: Number, restocked_at: datetime) -> TrackedMutation:
        """Add stock and stamp the restock time."""

        def apply() -> TrackedMutation:
            before = self._product_repo.get_by_id(product_id)
            if before is None:
                raise NotFoundError(f"Product with ID '{product_id}' not found")
            updated = self._product_repo.increment_stock(product_id, quantity, restocked_at)
            if updated is None:
                raise NotFoundError(f"Product with ID '{product_id}' not found")
            return TrackedMutation(
                MutationKind.CREDIT,
                product_id,
                quantity,
                previous_restocked_at=before.last_restocked,
            )

        return self.apply_and_track(apply)

    # --- Compensation ---------------------------------------------------------

    def rollback_tracked(self) -> None:
        """Undo every tracked mutation, newest first.

        Each inverse is attempted even if an earlier one fails; failures
        are logged and the remaining compensations still run.
        """
        while self._applied:
            mutation = self._applied.pop()
            try:
                self._invert(mutation)
            except Exception:
                logger.exception(
                    "compensation failed",
                    extra={
                        "kind": mutation.kind,
                        "product_id": mutation.product_id,
                        "quantity": mutation.quantity,
                    },
                )
            else:
                logger.info(
                    "mutation compensated",
                    extra={
                        "kind": mutation.kind,
                        "product_id": mutation.product_id,
                        "quantity": mutation.quantity,
                    },
                )

    def _invert(self, mutation: TrackedMutation) -> None:
        if mutation.kind == MutationKind.CREATE:
            self._product_repo.remove(mutation.product_id)
        elif mutation.kind == MutationKind.DEBIT:
            self._product_repo.increment_stock(mutation.product_id, mutation.quantity)
        elif mutation.kind == MutationKind.CREDIT:
            restored = self._product_repo.decrement_stock_if_sufficient(
                mutation.product_id, mutation.quantity
            )
            if restored is None:
                raise ConsistencyError(
                    f"Cannot reverse credit of {mutation.quantity} "
                    f"on product {mutation.product_id}"
                )
            restored.last_restocked = mutation.previous_restocked_at
            self._product_repo.save(restored)
