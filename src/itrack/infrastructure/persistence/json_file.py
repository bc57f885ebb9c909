"""Shared plumbing for the JSON-file repositories.

Every repository of one data directory shares a single re-entrant lock
(also held by the unit of work), and each public repository method runs
its whole read-modify-write cycle under it. In the application that lock
is a ``StoreLock``, so the cycles are serialized across processes too.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from decimal import Decimal
from pathlib import Path

from itrack.domain.model.value_objects import Number, to_number


class JsonFile:

    def __init__(self, file_path: Path, lock=None) -> None:
        self.path = file_path
        self.lock = lock if lock is not None else threading.RLock()
        self._ensure_file()

    def load(self) -> list[dict]:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        # Write-then-rename so a crash never leaves a truncated file behind.
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=self.path.name + ".", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(json.dumps(records, indent=2) + "\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.lock:
            if not self.path.exists():
                self.persist([])


def dump_number(value: Number) -> int | str:
    """Integers stay JSON numbers; Decimals become strings to stay exact."""
    if isinstance(value, Decimal):
        return str(value)
    return value


def load_number(raw: int | float | str) -> Number:
    return to_number(raw)
