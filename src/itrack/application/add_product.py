"""Application service: Add Product use case."""

from __future__ import annotations

from itrack.application.dto import ProductDTO, to_product_dto
from itrack.domain.exceptions import ValidationError
from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.value_objects import Money, to_number
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.service.low_stock_alert_tracker import LowStockAlertTracker


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        alert_tracker: LowStockAlertTracker | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._alert_tracker = alert_tracker

    def handle(
        self,
        name: str,
        price: str = "0",
        type: str = ProductType.SELLING.value,
        stock: str | int = 0,
        category: str | None = None,
        supplier_id: str | None = None,
        seller_id: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog.

        A product that starts out below the low-stock threshold triggers
        an alert check with unknown previous stock.
        """
        try:
            product_type = ProductType(type)
        except ValueError:
            raise ValidationError(
                f"Invalid product type '{type}'. Expected 'raw' or 'selling'."
            ) from None

        product = Product.create(
            name=name,
            price=Money.of(price),
            type=product_type,
            stock=to_number(stock),
            category=category,
            supplier_id=supplier_id,
            seller_id=seller_id,
        )
        [created] = self._product_repo.add_many([product])

        if self._alert_tracker is not None:
            self._alert_tracker.check(created)

        return to_product_dto(created)
