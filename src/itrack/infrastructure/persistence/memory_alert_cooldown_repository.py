"""Process-local cooldown store.

Lost on restart, and not shared between processes: two instances would
each send their own alert for the same crossing.
"""

from __future__ import annotations

from datetime import datetime

from itrack.domain.repository.alert_cooldown_repository import AlertCooldownRepository


class InMemoryAlertCooldownRepository(AlertCooldownRepository):

    def __init__(self) -> None:
        self._last_sent: dict[str, datetime] = {}

    def last_alert_at(self, product_id: str) -> datetime | None:
        return self._last_sent.get(product_id)

    def stamp(self, product_ids: list[str], at: datetime) -> None:
        for product_id in product_ids:
            self._last_sent[product_id] = at

    def clear(self, product_id: str) -> None:
        self._last_sent.pop(product_id, None)
