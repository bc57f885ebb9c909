"""Runtime settings, read from the environment.

=====================  =============================  ==================
Variable               Meaning                        Default
=====================  =============================  ==================
ITRACK_DATA_DIR        directory of the JSON files    <project>/data
ITRACK_LOG_LEVEL       logging level name             INFO
LOW_STOCK_THRESHOLD    alert when stock drops below   10
ADMIN_EMAIL            recipient of low-stock alerts  (unset: no alerts)
EMAIL_HOST             SMTP server                    smtp.gmail.com
EMAIL_PORT             SMTP port                      587
EMAIL_SECURE           "true" for implicit TLS        false (STARTTLS)
EMAIL_USER             SMTP login and sender          (unset)
EMAIL_PASS             SMTP password                  (unset)
=====================  =============================  ==================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from itrack.domain.service.low_stock_alert_tracker import DEFAULT_LOW_STOCK_THRESHOLD

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _int(raw: str | None, default: int) -> int:
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class SmtpSettings:
    host: str = "smtp.gmail.com"
    port: int = 587
    secure: bool = False
    user: str | None = None
    password: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: str = "INFO"
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    admin_email: str | None = None
    smtp: SmtpSettings = field(default_factory=SmtpSettings)

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            data_dir=Path(env["ITRACK_DATA_DIR"]) if env.get("ITRACK_DATA_DIR") else _DEFAULT_DATA_DIR,
            log_level=env.get("ITRACK_LOG_LEVEL", "INFO").upper(),
            low_stock_threshold=_int(env.get("LOW_STOCK_THRESHOLD"), DEFAULT_LOW_STOCK_THRESHOLD),
            admin_email=env.get("ADMIN_EMAIL") or None,
            smtp=SmtpSettings(
                host=env.get("EMAIL_HOST") or "smtp.gmail.com",
                port=_int(env.get("EMAIL_PORT"), 587),
                secure=env.get("EMAIL_SECURE", "").lower() == "true",
                user=env.get("EMAIL_USER") or None,
                password=env.get("EMAIL_PASS") or None,
            ),
        )
