"""Abstract store for low-stock alert cooldown timestamps.

Keyed by product ID. The default implementation is process memory; a
deployment with several instances can plug in a shared key-value store
here without touching the tracker.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class AlertCooldownRepository(ABC):

    @abstractmethod
    def last_alert_at(self, product_id: str) -> datetime | None:
        """When the last alert covering this product was sent, if any."""

    @abstractmethod
    def stamp(self, product_ids: list[str], at: datetime) -> None:
        """Record that an alert covering these products was sent at ``at``."""

    @abstractmethod
    def clear(self, product_id: str) -> None:
        """Forget the product's cooldown (stock is back at or above threshold)."""
