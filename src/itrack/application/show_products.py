"""Application service: product catalog queries."""

from __future__ import annotations

from itrack.application.dto import ProductDTO, to_product_dto
from itrack.domain.model.value_objects import Number
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.service.low_stock_alert_tracker import DEFAULT_LOW_STOCK_THRESHOLD


class ShowProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> list[ProductDTO]:
        return [to_product_dto(p) for p in self._product_repo.list_all()]

    def low_stock(self, threshold: Number = DEFAULT_LOW_STOCK_THRESHOLD) -> list[ProductDTO]:
        """Products below ``threshold``, lowest stock first."""
        return [to_product_dto(p) for p in self._product_repo.list_below_stock(threshold)]
