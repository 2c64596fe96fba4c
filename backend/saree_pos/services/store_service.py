# Overview: Durable key-value store; asynchronous get/put over the kv_store table.

"""
Durable Store

Holds the two top-level collections (inventory, sales) as JSON values keyed
by string. Every call is handed to a single background worker and returns a
concurrent.futures.Future, so the ledger can fire a write and move on while
reads at startup simply wait on .result().

One worker thread means writes land in the order they were requested. Each
put is its own transaction: a value is either fully replaced or untouched.
Nothing spans keys, so inventory and sales writes are independent.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import KeyValueEntry
from .exceptions import StorageUnavailable


logger = logging.getLogger(__name__)


class DurableStore:
    def __init__(self, app: Flask, namespace: str):
        self.app = app
        self.namespace = namespace
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="durable-store")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str) -> Future:
        """Future resolving to the stored value, or None when the key is absent."""
        return self._submit(self._get, key)

    def put(self, key: str, value: Any) -> Future:
        return self._submit(self._put, key, value)

    def delete(self, key: str) -> Future:
        return self._submit(self._delete, key)

    def drain(self, timeout: float | None = None) -> None:
        """Block until every operation requested so far has finished (ok or failed)."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _submit(self, fn, *args) -> Future:
        try:
            future = self._executor.submit(self._in_app_context, fn, *args)
        except RuntimeError as exc:
            # Executor already shut down
            future = Future()
            future.set_exception(StorageUnavailable(str(exc)))
            return future
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _in_app_context(self, fn, *args):
        with self.app.app_context():
            try:
                return fn(*args)
            except SQLAlchemyError as exc:
                db.session.rollback()
                logger.warning("Durable store operation on %r failed: %s", args[0] if args else None, exc)
                raise StorageUnavailable(f"Durable store operation failed: {exc}") from exc
            finally:
                db.session.remove()

    def _entry(self, key: str) -> KeyValueEntry | None:
        return db.session.query(KeyValueEntry).filter_by(namespace=self.namespace, key=key).first()

    def _get(self, key: str) -> Any:
        entry = self._entry(key)
        return entry.value if entry else None

    def _put(self, key: str, value: Any) -> None:
        entry = self._entry(key)
        if entry is None:
            entry = KeyValueEntry(namespace=self.namespace, key=key, value=value)
            db.session.add(entry)
        else:
            entry.value = value
        db.session.commit()

    def _delete(self, key: str) -> None:
        db.session.query(KeyValueEntry).filter_by(namespace=self.namespace, key=key).delete()
        db.session.commit()
