"""Application service: Production Statistics use case (query)."""

from __future__ import annotations

from datetime import datetime

from itrack.application.dto import ProductionStatsDTO
from itrack.application.list_productions import check_range
from itrack.domain.repository.production_repository import ProductionRepository


class ProductionStatsHandler:

    def __init__(self, production_repo: ProductionRepository) -> None:
        self._production_repo = production_repo

    def handle(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> ProductionStatsDTO:
        """Aggregate quantities over productions dated within ``[start, end]``.

        Breakdowns are keyed by the product name recorded with each
        production, so renamed products keep their historical totals.
        """
        check_range(start, end)
        productions = self._production_repo.list_between(start, end)

        raw_breakdown: dict = {}
        produced_breakdown: dict = {}
        for production in productions:
            for line in production.raw_materials:
                raw_breakdown[line.product_name] = (
                    raw_breakdown.get(line.product_name, 0) + line.quantity
                )
            for line in production.produced_products:
                produced_breakdown[line.product_name] = (
                    produced_breakdown.get(line.product_name, 0) + line.quantity
                )

        return ProductionStatsDTO(
            total_productions=len(productions),
            total_raw_materials_used=sum(p.total_raw_used for p in productions),
            total_products_produced=sum(p.total_produced for p in productions),
            raw_materials_breakdown=raw_breakdown,
            products_breakdown=produced_breakdown,
        )
