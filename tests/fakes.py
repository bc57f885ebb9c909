"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no network. Like the real
repositories they hand out copies, so a test only sees what was saved.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from itrack.domain.exceptions import NotificationError
from itrack.domain.model.product import Product
from itrack.domain.model.production import Production
from itrack.domain.model.value_objects import Number
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.repository.production_repository import ProductionRepository
from itrack.domain.service.notification_channel import NotificationChannel, SendResult

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeProductRepository(ProductRepository):
    """Dict-backed product store.

    ``drop_creations`` makes ``add_many`` silently lose that many of the
    last products of a batch; ``fail_increment_for`` makes ``increment_stock``
    raise for the given product IDs.
    """

    def __init__(
        self,
        products: list[Product] | None = None,
        lock: threading.RLock | None = None,
    ) -> None:
        self._store: dict[str, Product] = {}
        self._lock = lock if lock is not None else threading.RLock()
        for p in products or []:
            self._store[p.id] = replace(p)
        self.drop_creations = 0
        self.fail_increment_for: set[str] = set()

    def get_by_id(self, product_id: str) -> Product | None:
        with self._lock:
            product = self._store.get(product_id)
            return replace(product) if product is not None else None

    def get_many(self, product_ids: list[str]) -> list[Product]:
        with self._lock:
            return [replace(self._store[pid]) for pid in dict.fromkeys(product_ids) if pid in self._store]

    def list_all(self) -> list[Product]:
        with self._lock:
            return [replace(p) for p in self._store.values()]

    def list_below_stock(self, threshold: Number) -> list[Product]:
        with self._lock:
            low = [replace(p) for p in self._store.values() if p.stock < threshold]
        return sorted(low, key=lambda p: p.stock)

    def add_many(self, products: list[Product]) -> list[Product]:
        with self._lock:
            keep = len(products) - self.drop_creations
            created: list[Product] = []
            for product in products[:max(keep, 0)]:
                product = replace(product, id=str(self._next_id()))
                self._store[product.id] = product
                created.append(replace(product))
            return created

    def save(self, product: Product) -> None:
        with self._lock:
            self._store[product.id] = replace(product)

    def remove(self, product_id: str) -> None:
        with self._lock:
            self._store.pop(product_id, None)

    def decrement_stock_if_sufficient(
        self, product_id: str, quantity: Number
    ) -> Product | None:
        with self._lock:
            product = self._store.get(product_id)
            if product is None or not product.can_supply(quantity):
                return None
            product.debit(quantity)
            return replace(product)

    def increment_stock(
        self,
        product_id: str,
        quantity: Number,
        restocked_at: datetime | None = None,
    ) -> Product | None:
        with self._lock:
            if product_id in self.fail_increment_for:
                raise RuntimeError(f"storage unavailable for product {product_id}")
            product = self._store.get(product_id)
            if product is None:
                return None
            product.credit(quantity, restocked_at)
            return replace(product)

    def _next_id(self) -> int:
        return max((int(pid) for pid in self._store), default=0) + 1


class FakeProductionRepository(ProductionRepository):

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._store: dict[int, Production] = {}
        self._next_id = 1
        self._lock = lock if lock is not None else threading.RLock()
        self.fail_on_add = False

    def add(self, production: Production) -> Production:
        with self._lock:
            if self.fail_on_add:
                raise RuntimeError("production store unavailable")
            stored = replace(production, id=self._next_id)
            self._store[stored.id] = stored
            self._next_id += 1
            return stored

    def get_by_id(self, production_id: int) -> Production | None:
        return self._store.get(production_id)

    def list_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Production]:
        matching = [
            p for p in self._store.values()
            if (start is None or p.date >= start) and (end is None or p.date <= end)
        ]
        return sorted(matching, key=lambda p: (p.date, p.created_at), reverse=True)

    def list_all(self) -> list[Production]:
        return list(self._store.values())


class FakeNotificationChannel(NotificationChannel):
    """Records every message; can be told to fail or to blow up."""

    def __init__(self, fail: bool = False, raise_exc: Exception | None = None) -> None:
        self.fail = fail
        self.raise_exc = raise_exc
        self.sent: list[dict] = []

    def send(
        self,
        recipient: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> SendResult:
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.fail:
            return SendResult.failed(
                NotificationError("Connection refused", code="ECONNECTION")
            )
        self.sent.append({
            "recipient": recipient,
            "subject": subject,
            "text": text_body,
            "html": html_body,
        })
        return SendResult.ok(f"<msg-{len(self.sent)}@test>")
