"""Tests for the product catalog use cases and their alert hooks."""

import threading
from decimal import Decimal

import pytest

from itrack.application.add_product import AddProductHandler
from itrack.application.check_low_stock import CheckLowStockHandler
from itrack.application.set_stock import SetStockHandler
from itrack.application.show_products import ShowProductsHandler
from itrack.domain.exceptions import NotFoundError, ValidationError
from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.value_objects import Money
from itrack.domain.repository.unit_of_work import UnitOfWork
from itrack.domain.service.low_stock_alert_tracker import AlertDecision, LowStockAlertTracker
from itrack.infrastructure.persistence.memory_alert_cooldown_repository import (
    InMemoryAlertCooldownRepository,
)
from tests.fakes import (
    FakeClock,
    FakeNotificationChannel,
    FakeProductRepository,
    FakeProductionRepository,
)


def _setup(products: list[Product] | None = None):
    if products is None:
        products = [
            Product(id="1", name="Flour", price=Money.of("2"), type=ProductType.RAW, stock=12),
            Product(id="2", name="Bread", price=Money.of("4"), stock=30),
        ]
    lock = threading.RLock()
    product_repo = FakeProductRepository(products, lock)
    uow = UnitOfWork(product_repo, FakeProductionRepository(lock), lock)
    channel = FakeNotificationChannel()
    tracker = LowStockAlertTracker(
        product_repo=product_repo,
        channel=channel,
        cooldowns=InMemoryAlertCooldownRepository(),
        recipient="admin@example.com",
        threshold=10,
        clock=FakeClock(),
    )
    return product_repo, uow, tracker, channel


class TestAddProduct:

    def test_adds_with_next_id(self):
        product_repo, _, tracker, _ = _setup()
        dto = AddProductHandler(product_repo, tracker).handle(
            name="Yeast", price="1.25", type="raw", stock="40", category="Baking",
        )
        assert dto.id == "3"
        assert dto.type == "raw"
        assert dto.price == "$1.25"
        assert dto.stock == 40
        assert product_repo.get_by_id("3").category == "Baking"

    def test_invalid_type_rejected(self):
        product_repo, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid product type 'gadget'"):
            AddProductHandler(product_repo).handle(name="Yeast", type="gadget")

    def test_low_initial_stock_alerts(self):
        product_repo, _, tracker, channel = _setup()
        AddProductHandler(product_repo, tracker).handle(name="Yeast", stock=2)
        [message] = channel.sent
        assert "Yeast" in message["text"]

    def test_well_stocked_product_does_not_alert(self):
        product_repo, _, tracker, channel = _setup()
        AddProductHandler(product_repo, tracker).handle(name="Yeast", stock=50)
        assert channel.sent == []


class TestSetStock:

    def test_overwrites_stock(self):
        product_repo, uow, tracker, _ = _setup()
        dto = SetStockHandler(uow, tracker).handle("1", "7.5")
        assert dto.stock == Decimal("7.5")
        assert product_repo.get_by_id("1").stock == Decimal("7.5")

    def test_unknown_product(self):
        _, uow, _, _ = _setup()
        with pytest.raises(NotFoundError, match="Product with ID '99' not found"):
            SetStockHandler(uow).handle("99", 5)

    def test_negative_rejected(self):
        product_repo, uow, _, _ = _setup()
        with pytest.raises(ValidationError, match="cannot be negative"):
            SetStockHandler(uow).handle("1", -1)
        assert product_repo.get_by_id("1").stock == 12

    def test_drop_below_threshold_alerts_once(self):
        _, uow, tracker, channel = _setup()
        handler = SetStockHandler(uow, tracker)
        handler.handle("1", 8)
        handler.handle("1", 6)
        assert len(channel.sent) == 1

    def test_unchanged_value_skips_check(self):
        _, uow, tracker, channel = _setup(
            [Product(id="1", name="Flour", price=Money.of("2"), stock=3)]
        )
        SetStockHandler(uow, tracker).handle("1", 3)
        assert channel.sent == []


class TestShowProducts:

    def test_lists_all(self):
        product_repo, _, _, _ = _setup()
        assert [p.name for p in ShowProductsHandler(product_repo).handle()] == ["Flour", "Bread"]

    def test_low_stock_lowest_first(self):
        product_repo, _, _, _ = _setup([
            Product(id="1", name="Flour", price=Money.of("2"), stock=8),
            Product(id="2", name="Bread", price=Money.of("4"), stock=3),
            Product(id="3", name="Salt", price=Money.of("1"), stock=30),
        ])
        low = ShowProductsHandler(product_repo).low_stock(10)
        assert [p.name for p in low] == ["Bread", "Flour"]


class TestCheckLowStock:

    def test_sweep_sends_summary(self):
        _, _, tracker, channel = _setup([
            Product(id="1", name="Flour", price=Money.of("2"), stock=8),
        ])
        outcome = CheckLowStockHandler(tracker).handle()
        assert outcome.decision == AlertDecision.SENT
        assert outcome.product_ids == ("1",)
        assert len(channel.sent) == 1
