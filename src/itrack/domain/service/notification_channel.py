"""Port for delivering alerts to a human (e-mail in production)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from itrack.domain.exceptions import NotificationError


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: str | None = None
    error: NotificationError | None = None

    @staticmethod
    def ok(message_id: str | None) -> SendResult:
        return SendResult(success=True, message_id=message_id)

    @staticmethod
    def failed(error: NotificationError) -> SendResult:
        return SendResult(success=False, error=error)


class NotificationChannel(ABC):

    @abstractmethod
    def send(
        self,
        recipient: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> SendResult:
        """Deliver one message. Report failures in the result instead of raising."""
