"""A single JSON file holding every collection of the store.

Products and price records live in one document so a batch commits with
one atomic file replace: either every change lands or none does.

Writers serialize on a lock file next to the store (``store.json.lock``),
which holds across threads and processes alike. A transaction takes the
lock in ``begin`` and loads its staged copy only once the lock is held, so
two batches never stage from the same snapshot. The staged copy belongs to
the thread that opened the transaction; every other reader sees the last
committed file.
"""

from __future__ import annotations

import copy
import json
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from ims.domain.exceptions import PersistenceError

EMPTY_DOCUMENT = {"products": [], "price_records": []}


@dataclass
class _Transaction:
    lock: FileLock
    staged: dict


class JsonDocument:

    def __init__(self, file_path: Path, timeout: float = 5.0) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        self._timeout = timeout
        self._local = threading.local()
        self._ensure_file()

    # --- Access ---------------------------------------------------------------

    def read(self) -> dict:
        """Return this thread's staged document, or the committed one."""
        txn = self._transaction
        if txn is not None:
            return txn.staged
        return self._load()

    @contextmanager
    def mutate(self) -> Iterator[dict]:
        """Yield the document for in-place changes.

        Inside a transaction the changes stay staged. Outside one, the
        load, the change and the write happen under the store lock.
        """
        txn = self._transaction
        if txn is not None:
            yield txn.staged
            return
        lock = self._acquire()
        try:
            data = self._load()
            yield data
            self._persist(data)
        finally:
            lock.release()

    # --- Transactions ---------------------------------------------------------

    def begin(self) -> None:
        if self._transaction is not None:
            raise PersistenceError("A transaction is already in progress on this thread")
        lock = self._acquire()
        try:
            staged = self._load()
        except PersistenceError:
            lock.release()
            raise
        self._local.transaction = _Transaction(lock, staged)

    def commit(self) -> None:
        txn = self._transaction
        if txn is None:
            raise PersistenceError("No transaction in progress")
        try:
            self._persist(txn.staged)
        finally:
            self._end(txn)

    def rollback(self) -> None:
        txn = self._transaction
        if txn is not None:
            self._end(txn)

    # --- File helpers ---------------------------------------------------------

    @property
    def _transaction(self) -> _Transaction | None:
        return getattr(self._local, "transaction", None)

    def _end(self, txn: _Transaction) -> None:
        self._local.transaction = None
        txn.lock.release()

    def _acquire(self) -> FileLock:
        # a fresh lock per holder, so threads contend like separate processes
        lock = FileLock(str(self._lock_path))
        try:
            lock.acquire(timeout=self._timeout)
        except Timeout as exc:
            raise PersistenceError(
                f"Timed out after {self._timeout}s waiting for the store lock"
            ) from exc
        except OSError as exc:
            raise PersistenceError(f"Cannot lock store {self._file_path}: {exc}") from exc
        return lock

    def _load(self) -> dict:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read store {self._file_path}: {exc}") from exc
        for key, default in EMPTY_DOCUMENT.items():
            raw.setdefault(key, copy.deepcopy(default))
        return raw

    def _persist(self, data: dict) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write store {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot create store {self._file_path}: {exc}") from exc
        lock = self._acquire()
        try:
            if not self._file_path.exists():
                self._persist(copy.deepcopy(EMPTY_DOCUMENT))
        finally:
            lock.release()
