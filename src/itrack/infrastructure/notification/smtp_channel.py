"""SMTP implementation of NotificationChannel.

Sends a multipart (text + HTML) message. Every failure is classified
and returned as a ``SendResult``; nothing is raised to the caller.
"""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from itrack.domain.exceptions import NotificationError
from itrack.domain.service.notification_channel import NotificationChannel, SendResult
from itrack.infrastructure.config import SmtpSettings
from itrack.logging_config import get_logger

logger = get_logger("smtp")

SMTP_TIMEOUT_SECONDS = 30


class SmtpNotificationChannel(NotificationChannel):

    def __init__(self, settings: SmtpSettings) -> None:
        self._settings = settings

    def send(
        self,
        recipient: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> SendResult:
        if not self._settings.configured:
            return self._fail(NotificationError(
                "Email configuration missing: EMAIL_USER and EMAIL_PASS must be set",
                code="CONFIG_MISSING",
            ))
        if not recipient:
            return self._fail(NotificationError(
                "Recipient email address is missing", code="NO_RECIPIENT",
            ))

        message = self._build_message(recipient, subject, text_body, html_body)
        logger.info(
            "sending email",
            extra={
                "recipient": recipient,
                "subject": subject,
                "smtp_host": self._settings.host,
                "smtp_port": self._settings.port,
            },
        )

        try:
            with self._connect() as smtp:
                if not self._settings.secure:
                    smtp.starttls()
                smtp.login(self._settings.user, self._settings.password)
                smtp.send_message(message)
        except smtplib.SMTPAuthenticationError as exc:
            return self._fail(NotificationError(
                str(exc),
                code="EAUTH",
                details="Authentication failed. For Gmail, use an App Password, "
                "not your regular password.",
                response_code=exc.smtp_code,
            ))
        except smtplib.SMTPConnectError as exc:
            return self._fail(self._connection_error(exc))
        except smtplib.SMTPResponseException as exc:
            return self._fail(NotificationError(
                str(exc),
                code="ESERVER",
                details=f"SMTP server responded with: {exc.smtp_error!r}",
                response_code=exc.smtp_code,
            ))
        except smtplib.SMTPServerDisconnected as exc:
            return self._fail(self._connection_error(exc))
        except smtplib.SMTPException as exc:
            return self._fail(NotificationError(str(exc), code="UNKNOWN_ERROR"))
        except OSError as exc:
            # Refused connections, DNS failures and socket timeouts.
            return self._fail(self._connection_error(exc))

        message_id = message["Message-ID"]
        logger.info("email sent", extra={"recipient": recipient, "message_id": message_id})
        return SendResult.ok(message_id)

    # --- Internal helpers -----------------------------------------------------

    def _connect(self) -> smtplib.SMTP:
        if self._settings.secure:
            return smtplib.SMTP_SSL(
                self._settings.host, self._settings.port, timeout=SMTP_TIMEOUT_SECONDS
            )
        return smtplib.SMTP(
            self._settings.host, self._settings.port, timeout=SMTP_TIMEOUT_SECONDS
        )

    def _build_message(
        self,
        recipient: str,
        subject: str,
        text_body: str,
        html_body: str | None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f"Inventory System <{self._settings.user}>"
        message["To"] = recipient
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self._settings.host)
        message.set_content(text_body)
        message.add_alternative(html_body or text_body, subtype="html")
        return message

    @staticmethod
    def _connection_error(exc: Exception) -> NotificationError:
        return NotificationError(
            str(exc),
            code="ECONNECTION",
            details="Connection to SMTP server failed. Check network and "
            "firewall settings.",
        )

    @staticmethod
    def _fail(error: NotificationError) -> SendResult:
        logger.error("email not sent", extra={"error": error.as_dict()})
        return SendResult.failed(error)
