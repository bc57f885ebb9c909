"""Tests for the data-directory lock that serializes JSON store access."""

import multiprocessing
import threading
from pathlib import Path

from itrack.application.create_production import CreateProductionHandler
from itrack.domain.exceptions import InsufficientStockError
from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.production_request import (
    ExistingOutput,
    ProductionRequest,
    RawMaterialSpec,
)
from itrack.domain.model.value_objects import Money, Quantity
from itrack.domain.repository.unit_of_work import UnitOfWork
from itrack.infrastructure.persistence.json_product_repository import JsonProductRepository
from itrack.infrastructure.persistence.json_production_repository import (
    JsonProductionRepository,
)
from itrack.infrastructure.persistence.store_lock import StoreLock


def _wire(data_dir: Path):
    lock = StoreLock(data_dir / ".itrack.lock")
    products = JsonProductRepository(data_dir / "products.json", lock)
    productions = JsonProductionRepository(data_dir / "productions.json", lock)
    return products, productions, UnitOfWork(products, productions, lock)


def _run_productions(data_dir: str, attempts: int) -> int:
    """One CLI-like process: its own lock object, repositories and handler."""
    _, _, uow = _wire(Path(data_dir))
    handler = CreateProductionHandler(uow)
    succeeded = 0
    for _ in range(attempts):
        try:
            handler.handle(ProductionRequest(
                raw_materials=[RawMaterialSpec("1", Quantity(1))],
                produced_products=[ExistingOutput("2", Quantity(1))],
            ))
        except InsufficientStockError:
            continue
        succeeded += 1
    return succeeded


class TestStoreLock:

    def test_reentrant_in_one_thread(self, tmp_path):
        lock = StoreLock(tmp_path / ".itrack.lock")
        with lock:
            with lock:
                pass
        with lock:
            pass

    def test_excludes_other_threads(self, tmp_path):
        lock = StoreLock(tmp_path / ".itrack.lock")
        entered = threading.Event()

        def contender():
            with lock:
                entered.set()

        with lock:
            thread = threading.Thread(target=contender)
            thread.start()
            assert not entered.wait(0.2)
        thread.join(timeout=5)
        assert entered.is_set()


class TestConcurrentProcesses:

    def test_parallel_processes_never_oversell_or_lose_records(self, tmp_path):
        products, productions, _ = _wire(tmp_path)
        products.add_many([
            Product.create(name="Apples", price=Money.of("1"), type=ProductType.RAW, stock=30),
            Product.create(name="Juice", price=Money.of("3"), stock=0),
        ])

        ctx = multiprocessing.get_context("spawn")
        with ctx.Pool(2) as pool:
            results = pool.starmap(_run_productions, [(str(tmp_path), 25), (str(tmp_path), 25)])

        assert sum(results) == 30
        assert products.get_by_id("1").stock == 0
        assert products.get_by_id("2").stock == 30
        records = productions.list_between()
        assert len(records) == 30
        assert sorted(p.id for p in records) == list(range(1, 31))
        assert not list(tmp_path.glob("*.tmp"))
