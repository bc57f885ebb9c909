"""Unit of work: one serialization point for a multi-entity change.

A production run touches N raw products, M produced products and one new
record. Repositories share a single re-entrant lock with the unit of work
and take it on every read and write, so while a run holds it no other
caller can observe stock debited without the matching credits and record.
Failure recovery is the Stock Ledger's job (compensating rollback); this
class only provides isolation.
"""

from __future__ import annotations

import threading

from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.repository.production_repository import ProductionRepository


class UnitOfWork:

    def __init__(
        self,
        products: ProductRepository,
        productions: ProductionRepository,
        lock=None,
    ) -> None:
        """``lock`` is any re-entrant lock with acquire/release; the JSON store
        passes one that also excludes other processes."""
        self.products = products
        self.productions = productions
        self._lock = lock if lock is not None else threading.RLock()

    def __enter__(self) -> UnitOfWork:
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()
