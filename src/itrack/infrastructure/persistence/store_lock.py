"""Re-entrant lock over one data directory, shared by threads and processes.

Every CLI invocation is its own process, so a thread lock alone cannot
keep two ``production create`` runs from interleaving their
read-modify-write cycles. The lock file next to the JSON files orders
processes; the thread lock orders threads of this process and makes the
file lock's re-entrancy counter safe to share.
"""

from __future__ import annotations

import threading
from pathlib import Path

from filelock import FileLock


class StoreLock:

    def __init__(self, lock_path: Path) -> None:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = lock_path
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(lock_path), thread_local=False)

    def acquire(self) -> None:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise

    def release(self) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()

    def __enter__(self) -> StoreLock:
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
