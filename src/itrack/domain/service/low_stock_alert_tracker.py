"""Domain service: Low-Stock Alert Tracker.

Per product the tracker knows two states: OK (stock at or above the
threshold) and LOW. An alert is considered only when a product crosses
into LOW (or its previous stock is unknown), and at most once per
cooldown window per product. A single alert always summarizes every
product that is currently low, so one crossing does not turn into N
separate e-mails.

Delivery failures are soft: they are logged and returned in the
outcome, never raised, and never undo the stock change that caused the
check.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from itrack.domain.exceptions import NotificationError
from itrack.domain.model.product import Product
from itrack.domain.model.value_objects import Number
from itrack.domain.repository.alert_cooldown_repository import AlertCooldownRepository
from itrack.domain.repository.product_repository import ProductRepository
from itrack.domain.service.low_stock_message import (
    format_html,
    format_subject,
    format_text,
)
from itrack.domain.service.notification_channel import NotificationChannel
from itrack.logging_config import get_logger

logger = get_logger("alerts")

ALERT_COOLDOWN = timedelta(hours=1)
DEFAULT_LOW_STOCK_THRESHOLD = 10


class AlertState(Enum):
    OK = "OK"
    LOW = "LOW"


class AlertDecision(Enum):
    CLEARED = "cleared"  # stock at/above threshold, cooldown forgotten
    ALREADY_LOW = "already_low"  # no crossing
    COOLDOWN = "cooldown"
    NOTHING_LOW = "nothing_low"
    NOT_CONFIGURED = "not_configured"  # no recipient
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class AlertOutcome:
    decision: AlertDecision
    product_ids: tuple[str, ...] = ()
    message_id: str | None = None
    error: NotificationError | None = None

    @property
    def success(self) -> bool:
        return self.decision == AlertDecision.SENT

    @property
    def attempted(self) -> bool:
        return self.decision in (AlertDecision.SENT, AlertDecision.FAILED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LowStockAlertTracker:

    def __init__(
        self,
        product_repo: ProductRepository,
        channel: NotificationChannel,
        cooldowns: AlertCooldownRepository,
        recipient: str | None,
        threshold: Number = DEFAULT_LOW_STOCK_THRESHOLD,
        cooldown: timedelta = ALERT_COOLDOWN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._product_repo = product_repo
        self._channel = channel
        self._cooldowns = cooldowns
        self._recipient = recipient
        self._threshold = threshold
        self._cooldown = cooldown
        self._clock = clock

    def state_of(self, product: Product) -> AlertState:
        return AlertState.LOW if product.is_below(self._threshold) else AlertState.OK

    def check(self, product: Product, previous_stock: Number | None = None) -> AlertOutcome:
        """Evaluate one product after a stock change.

        ``previous_stock`` is the level before the change, or None when it
        is unknown (e.g. the product was just created).
        """
        log_extra = {
            "product_id": product.id,
            "product_name": product.name,
            "stock": product.stock,
            "previous_stock": previous_stock,
            "threshold": self._threshold,
        }

        if self.state_of(product) == AlertState.OK:
            self._cooldowns.clear(product.id)
            logger.debug("stock above threshold", extra=log_extra)
            return AlertOutcome(AlertDecision.CLEARED, (product.id,))

        crossed = previous_stock is None or previous_stock >= self._threshold
        if not crossed:
            logger.debug("product already low, no crossing", extra=log_extra)
            return AlertOutcome(AlertDecision.ALREADY_LOW, (product.id,))

        now = self._clock()
        last_sent = self._cooldowns.last_alert_at(product.id)
        if last_sent is not None and now - last_sent < self._cooldown:
            logger.info(
                "low stock alert suppressed by cooldown",
                extra={**log_extra, "last_alert_at": last_sent},
            )
            return AlertOutcome(AlertDecision.COOLDOWN, (product.id,))

        return self._send_batch(now)

    def check_all(self) -> AlertOutcome:
        """Summarize every low product in one alert, ignoring cooldowns."""
        return self._send_batch(self._clock())

    # --- Internal helpers -----------------------------------------------------

    def _send_batch(self, now: datetime) -> AlertOutcome:
        low = self._product_repo.list_below_stock(self._threshold)
        ids = tuple(p.id for p in low)
        if not low:
            logger.info("all products are well stocked", extra={"threshold": self._threshold})
            return AlertOutcome(AlertDecision.NOTHING_LOW)

        if not self._recipient:
            logger.error(
                "admin recipient not configured, cannot send low stock alert",
                extra={"low_count": len(low)},
            )
            return AlertOutcome(AlertDecision.NOT_CONFIGURED, ids)

        logger.info(
            "sending low stock alert",
            extra={"low_count": len(low), "product_ids": list(ids)},
        )
        try:
            result = self._channel.send(
                self._recipient,
                format_subject(low),
                format_text(low, self._threshold),
                format_html(low, self._threshold),
            )
        except Exception as exc:
            logger.exception("notification channel raised")
            error = NotificationError(str(exc), code="CHANNEL_ERROR")
            return AlertOutcome(AlertDecision.FAILED, ids, error=error)

        if not result.success:
            error = result.error or NotificationError("Unknown error")
            logger.error(
                "low stock alert delivery failed",
                extra={"error": error.as_dict(), "product_ids": list(ids)},
            )
            return AlertOutcome(AlertDecision.FAILED, ids, error=error)

        self._cooldowns.stamp(list(ids), now)
        logger.info(
            "low stock alert sent",
            extra={"message_id": result.message_id, "low_count": len(low)},
        )
        return AlertOutcome(AlertDecision.SENT, ids, message_id=result.message_id)
