"""Application service: Set Stock use case (manual stock correction)."""

from __future__ import annotations

from itrack.application.dto import ProductDTO, to_product_dto
from itrack.domain.exceptions import NotFoundError
from itrack.domain.model.value_objects import to_number
from itrack.domain.repository.unit_of_work import UnitOfWork
from itrack.domain.service.low_stock_alert_tracker import LowStockAlertTracker


class SetStockHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        alert_tracker: LowStockAlertTracker | None = None,
    ) -> None:
        self._uow = uow
        self._alert_tracker = alert_tracker

    def handle(self, product_id: str, stock: str | int) -> ProductDTO:
        """Overwrite a product's stock level.

        If the level actually changed, the alert tracker sees the old value
        so a drop below the threshold counts as a crossing.
        """
        new_stock = to_number(stock)

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product with ID '{product_id}' not found")
            old_stock = product.stock
            product.set_stock(new_stock)
            uow.products.save(product)

        if self._alert_tracker is not None and new_stock != old_stock:
            self._alert_tracker.check(product, old_stock)

        return to_product_dto(product)
