"""Application service: production history queries."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from itrack.application.dto import ProductionDTO, to_production_dtos
from itrack.domain.exceptions import ValidationError
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.repository.production_repository import ProductionRepository

# Last representable instant of a day at millisecond precision.
END_OF_DAY = time(23, 59, 59, 999000)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """``[00:00:00.000, 23:59:59.999]`` of ``day`` in UTC, both inclusive."""
    return (
        datetime.combine(day, time.min, tzinfo=timezone.utc),
        datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc),
    )


def check_range(start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and start > end:
        raise ValidationError("Start date must not be after end date")


class ListProductionsHandler:

    def __init__(
        self,
        production_repo: ProductionRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._production_repo = production_repo
        self._product_repo = product_repo

    def handle(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ProductionDTO]:
        """Productions dated within ``[start, end]``, newest first.

        Either bound may be omitted; with neither, the whole history.
        """
        check_range(start, end)
        productions = self._production_repo.list_between(start, end)
        return to_production_dtos(productions, self._product_repo)

    def for_date(self, day: date) -> list[ProductionDTO]:
        """Productions of one calendar day, most recently created first."""
        start, end = day_bounds(day)
        productions = self._production_repo.list_between(start, end)
        productions.sort(key=lambda p: p.created_at, reverse=True)
        return to_production_dtos(productions, self._product_repo)
