"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from itrack.domain.repository.unit_of_work import UnitOfWork
from itrack.domain.service.low_stock_alert_tracker import LowStockAlertTracker
from itrack.infrastructure.config import Settings
from itrack.infrastructure.notification.smtp_channel import SmtpNotificationChannel
from itrack.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from itrack.infrastructure.persistence.json_production_repository import (
    JsonProductionRepository,
)
from itrack.infrastructure.persistence.memory_alert_cooldown_repository import (
    InMemoryAlertCooldownRepository,
)
from itrack.infrastructure.persistence.store_lock import StoreLock


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def _store_lock() -> StoreLock:
    return StoreLock(settings().data_dir / ".itrack.lock")


@lru_cache(maxsize=1)
def _cooldowns() -> InMemoryAlertCooldownRepository:
    return InMemoryAlertCooldownRepository()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json", _store_lock())


def production_repository() -> JsonProductionRepository:
    return JsonProductionRepository(settings().data_dir / "productions.json", _store_lock())


def unit_of_work() -> UnitOfWork:
    return UnitOfWork(product_repository(), production_repository(), _store_lock())


def alert_tracker() -> LowStockAlertTracker:
    config = settings()
    return LowStockAlertTracker(
        product_repo=product_repository(),
        channel=SmtpNotificationChannel(config.smtp),
        cooldowns=_cooldowns(),
        recipient=config.admin_email,
        threshold=config.low_stock_threshold,
    )
