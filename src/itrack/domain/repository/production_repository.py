"""Abstract repository for Production records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from itrack.domain.model.production import Production


class ProductionRepository(ABC):

    @abstractmethod
    def add(self, production: Production) -> Production:
        """Insert a new record and return it with its ID assigned."""

    @abstractmethod
    def get_by_id(self, production_id: int) -> Production | None:
        """Return a record by its ID, or None if not found."""

    @abstractmethod
    def list_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Production]:
        """Return records whose ``date`` lies in ``[start, end]`` (either bound optional).

        Ordered by date descending, then creation time descending.
        """
