"""Application service: full low-stock sweep.

Summarizes every product below the threshold in one alert regardless of
cooldowns. Meant to be run periodically as a backstop for alerts the
per-mutation checks suppressed or failed to deliver.
"""

from __future__ import annotations

from itrack.domain.service.low_stock_alert_tracker import (
    AlertOutcome,
    LowStockAlertTracker,
)


class CheckLowStockHandler:

    def __init__(self, alert_tracker: LowStockAlertTracker) -> None:
        self._alert_tracker = alert_tracker

    def handle(self) -> AlertOutcome:
        return self._alert_tracker.check_all()
